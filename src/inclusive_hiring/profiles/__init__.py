"""Profile synchronisation on authentication events."""

from .synchronizer import ProfileSynchronizer

__all__ = ["ProfileSynchronizer"]
