"""Persistence gateway contract and the timeout-bounding decorator."""

import asyncio
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from inclusive_hiring.config import settings
from inclusive_hiring.core.errors import InvalidArgumentError, UnavailableError
from inclusive_hiring.utils.logging import get_logger

logger = get_logger(__name__)


class Collection(str, Enum):
    """Collections held by the gateway."""
    JOBS = "jobs"
    APPLICATIONS = "applications"
    CANDIDATES = "candidates"
    EMPLOYERS = "employers"
    SKILL_COURSES = "skill_courses"


class _ServerTimestamp:
    """Sentinel replaced by the gateway clock at commit."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class StoredRecord:
    """A record as returned by the gateway."""
    id: str
    version: int
    data: Dict[str, Any] = field(default_factory=dict)


class PersistenceGateway(ABC):
    """Durable key-collection store the core reads and writes through.

    Implementations must make ``insert`` with ``unique_on`` an atomic
    check-and-insert, and ``update`` with ``expected_version`` an atomic
    compare-and-swap.
    """

    @abstractmethod
    async def get(self, collection: Collection, record_id: str) -> StoredRecord:
        """Return the record or raise NotFoundError."""

    @abstractmethod
    async def query(self, collection: Collection, **equals: Any) -> List[StoredRecord]:
        """Return records whose fields equal every given value, in insertion order."""

    @abstractmethod
    async def insert(
        self,
        collection: Collection,
        data: Mapping[str, Any],
        *,
        record_id: Optional[str] = None,
        unique_on: Sequence[str] = (),
    ) -> str:
        """Insert a record and return its id. Raises ConflictError on duplicates."""

    @abstractmethod
    async def update(
        self,
        collection: Collection,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        expected_version: Optional[int] = None,
    ) -> StoredRecord:
        """Merge ``changes`` into a record. Raises NotFoundError or ConflictError."""


_request_timeout: ContextVar[Optional[float]] = ContextVar("request_timeout", default=None)


@contextmanager
def request_timeout(seconds: Optional[float]) -> Iterator[None]:
    """Bound every gateway call made in this context by ``seconds``.

    ``None`` keeps whatever bound is already active (or the configured default).
    """
    if seconds is None:
        yield
        return
    if seconds <= 0:
        raise InvalidArgumentError(
            f"Timeout must be positive, got {seconds}",
            details={"timeout": seconds}
        )
    token = _request_timeout.set(seconds)
    try:
        yield
    finally:
        _request_timeout.reset(token)


def current_timeout() -> float:
    value = _request_timeout.get()
    return settings.gateway_timeout_seconds if value is None else value


class BoundedGateway(PersistenceGateway):
    """Wraps a gateway so each call fails with UnavailableError past its timeout."""

    def __init__(self, inner: PersistenceGateway):
        self.inner = inner
        self.logger = logger.bind(component="bounded_gateway")

    async def _bounded(self, call: str, collection: Collection, awaitable):
        timeout = current_timeout()
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError as e:
            self.logger.warning(
                "Gateway call timed out",
                call=call,
                collection=collection.value,
                timeout_seconds=timeout
            )
            raise UnavailableError(
                f"Gateway {call} on {collection.value} timed out after {timeout}s",
                details={"call": call, "collection": collection.value}
            ) from e

    async def get(self, collection: Collection, record_id: str) -> StoredRecord:
        return await self._bounded("get", collection, self.inner.get(collection, record_id))

    async def query(self, collection: Collection, **equals: Any) -> List[StoredRecord]:
        return await self._bounded("query", collection, self.inner.query(collection, **equals))

    async def insert(self, collection, data, *, record_id=None, unique_on=()) -> str:
        return await self._bounded(
            "insert",
            collection,
            self.inner.insert(collection, data, record_id=record_id, unique_on=unique_on)
        )

    async def update(self, collection, record_id, changes, *, expected_version=None) -> StoredRecord:
        return await self._bounded(
            "update",
            collection,
            self.inner.update(collection, record_id, changes, expected_version=expected_version)
        )
