"""
Calendar date parsing and comparison.

Two textual encodings are accepted, ``YYYY-MM-DD`` and ``DD-MM-YYYY``;
everything leaving the system is rendered as ``YYYY-MM-DD``. Dates carry no
time-of-day; "today" is always the UTC calendar day so comparisons are the
same on every host.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from shared.domain.exceptions import InvalidDateError

ISO_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})$")
DMY_PATTERN = re.compile(r"^(?P<day>\d{2})-(?P<month>\d{2})-(?P<year>\d{4})$")

CANONICAL_FORMAT = "%Y-%m-%d"


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def parse_date(value: str) -> date:
    """
    Parse ``YYYY-MM-DD`` or ``DD-MM-YYYY`` into a ``date``.

    Raises InvalidDateError when the string matches neither pattern or the
    components do not name a real calendar day (``31-02-2024``).
    """
    if not isinstance(value, str):
        raise InvalidDateError("Date must be a string in YYYY-MM-DD or DD-MM-YYYY format")

    text = value.strip()
    match = ISO_PATTERN.match(text) or DMY_PATTERN.match(text)
    if match is None:
        raise InvalidDateError(
            f"Invalid date '{value}'. Use YYYY-MM-DD or DD-MM-YYYY (e.g. 2024-01-31 or 31-01-2024)"
        )

    year, month, day = (int(match.group(part)) for part in ("year", "month", "day"))
    try:
        parsed = date(year, month, day)
    except ValueError:
        raise InvalidDateError(f"Invalid calendar date '{value}'") from None

    if (parsed.year, parsed.month, parsed.day) != (year, month, day):
        raise InvalidDateError(f"Invalid calendar date '{value}'")
    return parsed


def is_ordered(a: date, b: date) -> bool:
    """True iff ``a`` strictly precedes ``b``."""
    return a < b


def is_future(d: date, *, today: date | None = None) -> bool:
    """True iff ``d`` is strictly later than the current UTC day."""
    return d > (today or today_utc())


def to_canonical(d: date) -> str:
    return d.strftime(CANONICAL_FORMAT)
