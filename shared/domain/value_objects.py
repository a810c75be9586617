"""
Common Value Objects

- DateRange: a half-open range of calendar days, used for booking
  periods and property availability windows
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import ValueObject
from shared.domain.dates import is_ordered, to_canonical
from shared.domain.exceptions import InvalidDateRangeError


@dataclass(frozen=True, order=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Ranges sort by start date, then end date.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if not is_ordered(self.start_date, self.end_date):
            raise InvalidDateRangeError(
                f"Start date ({to_canonical(self.start_date)}) must be before "
                f"end date ({to_canonical(self.end_date)})"
            )

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        End dates are exclusive, so back-to-back ranges don't overlap:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return not (self.end_date <= other.start_date or self.start_date >= other.end_date)

    def is_within(self, window: 'DateRange') -> bool:
        """Both bounds of the window are inclusive."""
        return self.start_date >= window.start_date and self.end_date <= window.end_date

    def to_dict(self) -> dict:
        return {
            'startDate': to_canonical(self.start_date),
            'endDate': to_canonical(self.end_date),
        }

    def __len__(self) -> int:
        """Number of nights"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{to_canonical(self.start_date)} - {to_canonical(self.end_date)}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
