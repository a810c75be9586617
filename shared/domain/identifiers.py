"""Parsing of opaque record identifiers received from callers."""

from __future__ import annotations

from uuid import UUID

from shared.domain.exceptions import InvalidIdentifierError


def parse_identifier(value, label: str = "record") -> UUID:
    """Return ``value`` as a UUID or raise InvalidIdentifierError."""
    if isinstance(value, UUID):
        return value
    text = str(value).strip() if value is not None else ""
    try:
        return UUID(text)
    except ValueError:
        raise InvalidIdentifierError(f"Invalid {label} ID '{text}'. Must be a UUID.") from None
