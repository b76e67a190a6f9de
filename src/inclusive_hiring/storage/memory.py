"""In-memory persistence gateway for development, tests and the demo server."""

import asyncio
import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from inclusive_hiring.core.errors import ConflictError, NotFoundError
from inclusive_hiring.storage.gateway import (
    SERVER_TIMESTAMP,
    Collection,
    PersistenceGateway,
    StoredRecord,
)
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)

_IndexKey = Tuple[Collection, Tuple[str, ...]]


class InMemoryGateway(PersistenceGateway):
    """
    Dictionary-backed gateway honouring the full gateway contract.

    Every mutation runs without an await between its check and its write, so
    it is atomic with respect to other coroutines on the event loop. The
    optional ``latency`` is awaited before that section, which lets tests
    interleave concurrent callers and exercise timeouts without leaving
    partial writes behind. Fields named in ``unique_on`` are treated as
    immutable once inserted.
    """

    def __init__(
        self,
        latency: float = 0.0,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.latency = latency
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger.bind(component="memory_gateway")

        self._collections: Dict[Collection, Dict[str, StoredRecord]] = {c: {} for c in Collection}
        self._unique_indexes: Dict[_IndexKey, Dict[Tuple[Any, ...], str]] = {}

    async def _io(self) -> None:
        # Always yield once so concurrent callers interleave like real I/O
        await asyncio.sleep(self.latency)

    def _resolve(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        now = self.clock()
        return {
            key: now if value is SERVER_TIMESTAMP else copy.deepcopy(value)
            for key, value in data.items()
        }

    async def get(self, collection: Collection, record_id: str) -> StoredRecord:
        await self._io()
        record = self._collections[collection].get(record_id)
        if record is None:
            raise NotFoundError(
                f"{collection.value} record {record_id} not found",
                details={"collection": collection.value, "id": record_id}
            )
        return copy.deepcopy(record)

    async def query(self, collection: Collection, **equals: Any) -> List[StoredRecord]:
        await self._io()
        return [
            copy.deepcopy(record)
            for record in self._collections[collection].values()
            if all(record.data.get(name) == value for name, value in equals.items())
        ]

    async def insert(
        self,
        collection: Collection,
        data: Mapping[str, Any],
        *,
        record_id: Optional[str] = None,
        unique_on: Sequence[str] = (),
    ) -> str:
        await self._io()

        records = self._collections[collection]
        record_id = record_id or uuid.uuid4().hex
        if record_id in records:
            raise ConflictError(
                f"{collection.value} record {record_id} already exists",
                details={"collection": collection.value, "existing_id": record_id}
            )

        if unique_on:
            index_key: _IndexKey = (collection, tuple(unique_on))
            if index_key not in self._unique_indexes:
                self._unique_indexes[index_key] = self._build_index(collection, unique_on)
            unique_value = tuple(data.get(name) for name in unique_on)
            existing_id = self._unique_indexes[index_key].get(unique_value)
            if existing_id is not None:
                raise ConflictError(
                    f"{collection.value} record with {dict(zip(unique_on, unique_value))} already exists",
                    details={"collection": collection.value, "existing_id": existing_id}
                )

        stored = StoredRecord(id=record_id, version=1, data=self._resolve(data))
        records[record_id] = stored
        for (indexed_collection, fields), index in self._unique_indexes.items():
            if indexed_collection == collection:
                index[tuple(stored.data.get(name) for name in fields)] = record_id
        self.logger.debug("Record inserted", collection=collection.value, record_id=record_id)
        return record_id

    def _build_index(self, collection: Collection, unique_on: Sequence[str]) -> Dict[Tuple[Any, ...], str]:
        return {
            tuple(record.data.get(name) for name in unique_on): record.id
            for record in self._collections[collection].values()
        }

    async def update(
        self,
        collection: Collection,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> StoredRecord:
        await self._io()

        records = self._collections[collection]
        current = records.get(record_id)
        if current is None:
            raise NotFoundError(
                f"{collection.value} record {record_id} not found",
                details={"collection": collection.value, "id": record_id}
            )
        if expected_version is not None and current.version != expected_version:
            raise ConflictError(
                f"{collection.value} record {record_id} was modified concurrently",
                details={
                    "collection": collection.value,
                    "expected_version": expected_version,
                    "actual_version": current.version
                }
            )

        merged = {**current.data, **self._resolve(changes)}
        updated = StoredRecord(id=record_id, version=current.version + 1, data=merged)
        records[record_id] = updated
        self.logger.debug(
            "Record updated",
            collection=collection.value,
            record_id=record_id,
            version=updated.version
        )
        return copy.deepcopy(updated)
