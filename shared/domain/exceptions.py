"""
Domain error taxonomy.

Every rejection raised by the domain carries a machine-readable ``kind``,
a human-readable message and the HTTP status the API layer maps it to:

- InputError (400): malformed dates, unordered ranges, non-future start,
  bad pagination, bad identifiers
- NotFoundError (404): property or booking id does not resolve
- ConflictError (409): window violation, inactive property, overlap
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400
    default_kind = "error"

    def __init__(self, message: str, *, kind: str | None = None, extra: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind
        self.extra = extra or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind, "message": self.message}
        payload.update(self.extra)
        return payload


class InputError(DomainError):
    status_code = 400
    default_kind = "invalid_input"


class InvalidDateError(InputError):
    default_kind = "invalid_date"


class InvalidDateRangeError(InputError):
    default_kind = "invalid_range"


class InvalidPaginationError(InputError):
    default_kind = "invalid_pagination"


class InvalidIdentifierError(InputError):
    default_kind = "invalid_identifier"


class NotFoundError(DomainError):
    status_code = 404
    default_kind = "not_found"


class ConflictError(DomainError):
    status_code = 409
    default_kind = "conflict"


class OverlapConflictError(ConflictError):
    """Raised when the requested range overlaps active bookings."""

    default_kind = "overlap"

    def __init__(self, message: str, *, overlaps: list[dict[str, str]], requested: dict[str, str]):
        super().__init__(message, extra={"overlaps": overlaps, "requested": requested})
        self.overlaps = overlaps
        self.requested = requested
