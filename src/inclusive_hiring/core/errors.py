"""Error taxonomy shared by every core operation.

Each error carries the HTTP status the API layer answers with, so handlers
never need a lookup table of their own.
"""

from typing import Any, Dict, Optional


class MarketplaceError(Exception):
    """Base class for all core failures."""

    code = "internal"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(MarketplaceError):
    """A referenced entity does not exist."""

    code = "not_found"
    status_code = 404


class UnauthenticatedError(MarketplaceError):
    """The caller's identity is missing or does not resolve to a signed-in account."""

    code = "unauthenticated"
    status_code = 401


class ForbiddenError(MarketplaceError):
    """The identity is valid but does not own the entity it is acting on."""

    code = "forbidden"
    status_code = 403


class ConflictError(MarketplaceError):
    """A uniqueness violation or a lost concurrent modification."""

    code = "conflict"
    status_code = 409


class InvalidTransitionError(MarketplaceError):
    """The requested status is not reachable from the current status."""

    code = "invalid_transition"
    status_code = 409


class InvalidArgumentError(MarketplaceError):
    """Malformed input, such as an empty job title."""

    code = "invalid_argument"
    status_code = 400


class UnavailableError(MarketplaceError):
    """The gateway timed out or is unreachable."""

    code = "unavailable"
    status_code = 503
