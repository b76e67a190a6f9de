"""Job catalog and application lifecycle."""

from .catalog import JobCatalog
from .application import (
    APPLICATION_UNIQUE_FIELDS,
    ApplicationLifecycleManager,
    coerce_status,
)

__all__ = [
    "JobCatalog",
    "APPLICATION_UNIQUE_FIELDS",
    "ApplicationLifecycleManager",
    "coerce_status",
]
