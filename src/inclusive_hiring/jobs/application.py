"""Application lifecycle: apply, status transitions and withdrawal."""

from typing import Any, Dict, List, Optional, Union

from inclusive_hiring.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidTransitionError,
    NotFoundError,
    UnauthenticatedError,
)
from inclusive_hiring.core.models import Application, ApplicationStatus
from inclusive_hiring.jobs.catalog import JobCatalog
from inclusive_hiring.storage.gateway import SERVER_TIMESTAMP, Collection, PersistenceGateway
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)

# One application per candidate per job, enforced by the gateway
APPLICATION_UNIQUE_FIELDS = ("candidate_id", "job_id")

StatusLike = Union[ApplicationStatus, str]


def coerce_status(value: StatusLike) -> ApplicationStatus:
    """Parse a status, mapping unknown values to InvalidArgumentError."""
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError as e:
        raise InvalidArgumentError(
            f"Unknown application status: {value!r}",
            details={"allowed": [status.value for status in ApplicationStatus]}
        ) from e


class ApplicationLifecycleManager:
    """Creates applications and moves them forward through the status workflow."""

    def __init__(self, gateway: PersistenceGateway, catalog: JobCatalog):
        self.logger = logger.bind(component="application_lifecycle")
        self.gateway = gateway
        self.catalog = catalog

    async def get_application(self, application_id: str) -> Application:
        record = await self.gateway.get(Collection.APPLICATIONS, application_id)
        return Application.from_record(record)

    async def apply(
        self,
        candidate_id: str,
        job_id: str,
        idempotency_key: Optional[str] = None
    ) -> Application:
        """
        Create an application for ``candidate_id`` against ``job_id``.

        The job title and company are copied onto the application so the
        candidate's view stays stable if the listing changes later.

        Args:
            candidate_id: Signed-in candidate identity
            job_id: Job to apply for
            idempotency_key: Client key for safe retries; a retry carrying the
                key of the request that created the application gets that
                application back instead of a conflict

        Returns:
            The new application, status Applied

        Raises:
            NotFoundError: The job does not exist
            UnauthenticatedError: The candidate is not a signed-in identity
            ConflictError: The candidate already applied to this job
        """
        job = await self.catalog.get_job(job_id)
        await self._require_candidate(candidate_id)

        self.logger.info(
            "Creating job application",
            candidate_id=candidate_id,
            job_id=job_id,
            job_title=job.title,
            company=job.company_name
        )

        data: Dict[str, Any] = {
            "job_id": job.id,
            "candidate_id": candidate_id,
            "job_title": job.title,
            "company_name": job.company_name,
            "status": ApplicationStatus.APPLIED.value,
            "applied_at": SERVER_TIMESTAMP,
            "updated_at": SERVER_TIMESTAMP,
            "idempotency_key": idempotency_key,
        }
        try:
            application_id = await self.gateway.insert(
                Collection.APPLICATIONS,
                data,
                unique_on=APPLICATION_UNIQUE_FIELDS
            )
        except ConflictError as e:
            existing_id = e.details.get("existing_id")
            if idempotency_key and existing_id:
                existing = await self.get_application(existing_id)
                if existing.idempotency_key == idempotency_key:
                    self.logger.info(
                        "Apply retry matched existing application",
                        application_id=existing.id,
                        candidate_id=candidate_id,
                        job_id=job_id
                    )
                    return existing

            self.logger.warning(
                "Duplicate application rejected",
                candidate_id=candidate_id,
                job_id=job_id,
                existing_id=existing_id
            )
            raise ConflictError(
                f"Candidate {candidate_id} has already applied to job {job_id}",
                details={"candidate_id": candidate_id, "job_id": job_id, "existing_id": existing_id}
            ) from e

        application = await self.get_application(application_id)
        self.logger.info(
            "Job application created",
            application_id=application.id,
            status=application.status.value
        )
        return application

    async def transition(
        self,
        application_id: str,
        new_status: StatusLike,
        *,
        expected_status: Optional[StatusLike] = None,
        actor_id: Optional[str] = None
    ) -> Application:
        """
        Move an application to ``new_status``.

        The target must rank strictly later than the current status and the
        current status must not be terminal. The write is a compare-and-swap
        on the record version, so a racing transition surfaces as a conflict.

        Args:
            application_id: Application to move
            new_status: Target status
            expected_status: Status the caller believes the application is in.
                When given, an application already at ``new_status`` is
                returned unchanged (the caller's earlier attempt landed), and
                any other mismatch is a conflict.
            actor_id: Employer issuing the review action; must own the job

        Raises:
            NotFoundError: The application does not exist
            ForbiddenError: ``actor_id`` does not own the job
            InvalidTransitionError: The target is not reachable
            ConflictError: The application changed underneath the caller
        """
        target = coerce_status(new_status)
        application = await self.get_application(application_id)
        if actor_id is not None:
            await self._require_job_owner(application, actor_id)
        return await self._move(application, target, expected_status)

    async def withdraw(
        self,
        application_id: str,
        candidate_id: str,
        *,
        expected_status: Optional[StatusLike] = None
    ) -> Application:
        """Withdraw an application on behalf of the candidate who owns it."""
        if not candidate_id:
            raise UnauthenticatedError("Withdrawing requires a signed-in candidate")

        application = await self.get_application(application_id)
        if application.candidate_id != candidate_id:
            self.logger.warning(
                "Withdrawal by non-owner rejected",
                application_id=application_id,
                candidate_id=candidate_id
            )
            raise ForbiddenError(
                f"Application {application_id} belongs to another candidate",
                details={"application_id": application_id}
            )
        return await self._move(application, ApplicationStatus.WITHDRAWN, expected_status)

    async def _move(
        self,
        application: Application,
        target: ApplicationStatus,
        expected_status: Optional[StatusLike]
    ) -> Application:
        current = application.status

        if expected_status is not None:
            expected = coerce_status(expected_status)
            if current == target and expected != target:
                self.logger.info(
                    "Transition retry already applied",
                    application_id=application.id,
                    status=current.value
                )
                return application
            if current != expected:
                raise ConflictError(
                    f"Application {application.id} is {current.value}, not {expected.value}",
                    details={"current_status": current.value, "expected_status": expected.value}
                )

        if not current.can_transition_to(target):
            self.logger.warning(
                "Invalid status transition",
                application_id=application.id,
                from_status=current.value,
                to_status=target.value
            )
            raise InvalidTransitionError(
                f"Cannot move application from {current.value} to {target.value}",
                details={"from_status": current.value, "to_status": target.value}
            )

        try:
            record = await self.gateway.update(
                Collection.APPLICATIONS,
                application.id,
                {"status": target.value, "updated_at": SERVER_TIMESTAMP},
                expected_version=application.version
            )
        except ConflictError as e:
            self.logger.warning(
                "Concurrent status change detected",
                application_id=application.id,
                to_status=target.value
            )
            raise ConflictError(
                f"Application {application.id} was changed concurrently; re-read and retry",
                details={"application_id": application.id, **e.details}
            ) from e

        updated = Application.from_record(record)
        self.logger.info(
            "Application status changed",
            application_id=updated.id,
            from_status=current.value,
            to_status=updated.status.value
        )
        return updated

    async def list_for_candidate(
        self,
        candidate_id: str,
        status: Optional[StatusLike] = None
    ) -> List[Application]:
        """Applications made by ``candidate_id``, optionally narrowed to one status."""
        filters: Dict[str, Any] = {"candidate_id": candidate_id}
        if status is not None:
            filters["status"] = coerce_status(status).value
        records = await self.gateway.query(Collection.APPLICATIONS, **filters)
        return [Application.from_record(record) for record in records]

    async def list_for_job(self, job_id: str) -> List[Application]:
        records = await self.gateway.query(Collection.APPLICATIONS, job_id=job_id)
        return [Application.from_record(record) for record in records]

    async def _require_candidate(self, candidate_id: str) -> None:
        if not candidate_id:
            raise UnauthenticatedError("Applying requires a signed-in candidate")
        try:
            await self.gateway.get(Collection.CANDIDATES, candidate_id)
        except NotFoundError as e:
            self.logger.warning("Apply from unknown identity", candidate_id=candidate_id)
            raise UnauthenticatedError(
                f"Identity {candidate_id} is not a signed-in candidate",
                details={"candidate_id": candidate_id}
            ) from e

    async def _require_job_owner(self, application: Application, actor_id: str) -> None:
        job = await self.catalog.get_job(application.job_id)
        if job.employer_id != actor_id:
            self.logger.warning(
                "Status change by non-owner rejected",
                application_id=application.id,
                actor_id=actor_id
            )
            raise ForbiddenError(
                f"Employer {actor_id} does not own job {job.id}",
                details={"job_id": job.id}
            )
