"""Domain error taxonomy.

Every error carries the HTTP status it maps to so routers can let them
propagate; ``app.main`` installs a single handler for the base class.
"""

from typing import Any, Optional

from fastapi import status


class LandlordLedgerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[list[dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(LandlordLedgerError):
    """Malformed or out-of-range input, detected before any write."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input data"

    @classmethod
    def for_field(cls, field: str, msg: str) -> "ValidationError":
        return cls(errors=[{"loc": [field], "msg": msg}])


class NotFoundError(LandlordLedgerError):
    """Referenced landlord or review does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(LandlordLedgerError):
    """A uniqueness invariant would be violated."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UpstreamUnavailableError(LandlordLedgerError):
    """An external provider failed or timed out."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream provider unavailable"


class InternalError(LandlordLedgerError):
    """Unexpected store failure."""
