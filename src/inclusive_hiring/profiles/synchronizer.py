"""Idempotent candidate / employer profile upserts driven by sign-in events."""

from typing import Any, Dict, Mapping, Type, Union

from pydantic import BaseModel, ValidationError

from inclusive_hiring.core.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
)
from inclusive_hiring.core.models import (
    CandidateProfile,
    CandidateProfileFields,
    EmployerProfile,
    EmployerProfileFields,
    Identity,
    Role,
)
from inclusive_hiring.storage.gateway import (
    SERVER_TIMESTAMP,
    Collection,
    PersistenceGateway,
    StoredRecord,
)
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)

CandidateFieldsLike = Union[CandidateProfileFields, Mapping[str, Any]]
EmployerFieldsLike = Union[EmployerProfileFields, Mapping[str, Any]]


def _coerce_fields(model: Type[BaseModel], fields: Any) -> Any:
    """Validate a plain mapping into ``model``, reporting bad input as InvalidArgumentError."""
    if isinstance(fields, model):
        return fields
    try:
        return model.model_validate(dict(fields))
    except (TypeError, ValueError, ValidationError) as e:
        messages = [error["msg"] for error in e.errors()] if isinstance(e, ValidationError) else [str(e)]
        raise InvalidArgumentError(
            "Invalid profile fields",
            details={"fields": model.__name__, "errors": messages}
        ) from e


class ProfileSynchronizer:
    """
    Keeps one profile record per account.

    Upserts merge only the supplied fields. ``created_at`` is written by the
    first upsert for an identity and never again, and an upsert that would
    not change any stored value performs no write at all.
    """

    def __init__(self, gateway: PersistenceGateway):
        self.logger = logger.bind(component="profile_synchronizer")
        self.gateway = gateway

    async def on_identity_established(
        self,
        identity: Identity
    ) -> Union[CandidateProfile, EmployerProfile]:
        """Single entry point for sign-in / sign-up events from the auth collaborator."""
        self.logger.info("Identity established", uid=identity.uid, role=identity.role.value)

        if identity.role == Role.EMPLOYER:
            return await self.upsert_employer_profile(
                identity.uid,
                EmployerProfileFields(display_name=identity.display_name, contact_email=identity.email)
            )
        return await self.upsert_candidate_profile(
            identity.uid,
            CandidateProfileFields(display_name=identity.display_name, email=identity.email)
        )

    async def upsert_candidate_profile(
        self,
        identity: str,
        fields: CandidateFieldsLike
    ) -> CandidateProfile:
        fields = _coerce_fields(CandidateProfileFields, fields)
        record = await self._upsert(Collection.CANDIDATES, identity, fields.model_dump(exclude_none=True))
        return CandidateProfile.from_record(record)

    async def upsert_employer_profile(
        self,
        identity: str,
        fields: EmployerFieldsLike
    ) -> EmployerProfile:
        fields = _coerce_fields(EmployerProfileFields, fields)
        record = await self._upsert(Collection.EMPLOYERS, identity, fields.model_dump(exclude_none=True))
        return EmployerProfile.from_record(record)

    async def _upsert(
        self,
        collection: Collection,
        identity: str,
        changes: Dict[str, Any]
    ) -> StoredRecord:
        if not identity:
            raise UnauthenticatedError("Profile upsert requires an identity")
        changes.pop("created_at", None)

        try:
            current = await self.gateway.get(collection, identity)
        except NotFoundError:
            try:
                await self.gateway.insert(
                    collection,
                    {**changes, "created_at": SERVER_TIMESTAMP},
                    record_id=identity
                )
                self.logger.info("Profile created", collection=collection.value, uid=identity)
                return await self.gateway.get(collection, identity)
            except ConflictError:
                # Another sign-in for this identity created the record first
                current = await self.gateway.get(collection, identity)

        pending = {key: value for key, value in changes.items() if current.data.get(key) != value}
        if not pending:
            self.logger.debug("Profile unchanged", collection=collection.value, uid=identity)
            return current

        updated = await self.gateway.update(collection, identity, pending)
        self.logger.info(
            "Profile merged",
            collection=collection.value,
            uid=identity,
            fields=sorted(pending)
        )
        return updated
