"""Persistence gateway contract and implementations."""

from .gateway import (
    SERVER_TIMESTAMP,
    BoundedGateway,
    Collection,
    PersistenceGateway,
    StoredRecord,
    current_timeout,
    request_timeout,
)
from .memory import InMemoryGateway

__all__ = [
    "SERVER_TIMESTAMP",
    "BoundedGateway",
    "Collection",
    "PersistenceGateway",
    "StoredRecord",
    "current_timeout",
    "request_timeout",
    "InMemoryGateway",
]
