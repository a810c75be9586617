"""
Booking Admission Engine

Decides whether a requested date range may be booked against a property.
The engine is a pipeline of check functions over data that has already
been loaded; it performs no I/O and owns no state.

Checks run in a fixed order and the first failure wins:

1. range validity      start < end                           (400)
2. future start        start > today, when required          (400)
3. property resolved   the property exists                   (404)
   property bookable   the property is active                (409)
4. window containment  from <= start and end <= to           (409)
5. overlap             no active booking overlaps [start,end) (409)

An overlap rejection lists every conflicting range, not just the first.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple
from uuid import UUID

from shared.domain.dates import is_future, is_ordered, to_canonical, today_utc
from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    InputError,
    InvalidDateRangeError,
    NotFoundError,
    OverlapConflictError,
)
from shared.domain.value_objects import DateRange

from apps.bookings.domain.inventory import Inventory


class RejectionKind(str, Enum):
    INVALID_RANGE = 'invalid_range'
    START_NOT_IN_FUTURE = 'start_not_in_future'
    PROPERTY_NOT_FOUND = 'property_not_found'
    PROPERTY_NOT_BOOKABLE = 'property_not_bookable'
    OUTSIDE_WINDOW = 'outside_window'
    OVERLAP = 'overlap'


@dataclass(frozen=True)
class AdmissionRequest:
    """
    A proposed (property, start, end) triple

    ``exclude_booking_id`` is set when a booking is being updated in place,
    so its own current range is not reported as a conflict.
    """
    property_id: UUID
    start_date: date
    end_date: date
    require_future: bool = True
    exclude_booking_id: Optional[UUID] = None

    @property
    def dates(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


@dataclass(frozen=True)
class Rejection:
    kind: RejectionKind
    message: str
    requested: Optional[DateRange] = None
    overlaps: Tuple[DateRange, ...] = ()

    def to_exception(self) -> DomainError:
        if self.kind is RejectionKind.OVERLAP:
            return OverlapConflictError(
                self.message,
                overlaps=[dates.to_dict() for dates in self.overlaps],
                requested=self.requested.to_dict(),
            )
        extra = {'requested': self.requested.to_dict()} if self.requested else None
        if self.kind is RejectionKind.INVALID_RANGE:
            return InvalidDateRangeError(self.message, kind=self.kind.value)
        if self.kind is RejectionKind.START_NOT_IN_FUTURE:
            return InputError(self.message, kind=self.kind.value, extra=extra)
        if self.kind is RejectionKind.PROPERTY_NOT_FOUND:
            return NotFoundError(self.message, kind=self.kind.value)
        return ConflictError(self.message, kind=self.kind.value, extra=extra)


Check = Callable[[AdmissionRequest, Optional[Inventory], date], Optional[Rejection]]


def check_range_order(request: AdmissionRequest, inventory: Optional[Inventory], today: date) -> Optional[Rejection]:
    if not is_ordered(request.start_date, request.end_date):
        return Rejection(RejectionKind.INVALID_RANGE, "Start date must be before end date")
    return None


def check_future_start(request: AdmissionRequest, inventory: Optional[Inventory], today: date) -> Optional[Rejection]:
    if request.require_future and not is_future(request.start_date, today=today):
        return Rejection(
            RejectionKind.START_NOT_IN_FUTURE,
            "Start date must be in the future",
            requested=request.dates,
        )
    return None


def check_property_resolved(request: AdmissionRequest, inventory: Optional[Inventory], today: date) -> Optional[Rejection]:
    if inventory is None:
        return Rejection(RejectionKind.PROPERTY_NOT_FOUND, f"Property with ID {request.property_id} not found")
    return None


def check_property_bookable(request: AdmissionRequest, inventory: Optional[Inventory], today: date) -> Optional[Rejection]:
    if not inventory.is_bookable:
        return Rejection(
            RejectionKind.PROPERTY_NOT_BOOKABLE,
            f"Property with ID {request.property_id} is not accepting bookings (status: {inventory.property_status})",
            requested=request.dates,
        )
    return None


def check_window(request: AdmissionRequest, inventory: Optional[Inventory], today: date) -> Optional[Rejection]:
    window = inventory.window
    if not request.dates.is_within(window):
        return Rejection(
            RejectionKind.OUTSIDE_WINDOW,
            "Booking dates must be within the property's availability range: "
            f"{to_canonical(window.start_date)} to {to_canonical(window.end_date)}",
            requested=request.dates,
        )
    return None


def check_overlaps(request: AdmissionRequest, inventory: Optional[Inventory], today: date) -> Optional[Rejection]:
    conflicts = inventory.conflicts_for(request.dates, exclude_booking_id=request.exclude_booking_id)
    if conflicts:
        return Rejection(
            RejectionKind.OVERLAP,
            "Booking dates overlap with existing bookings",
            requested=request.dates,
            overlaps=tuple(allocation.dates for allocation in conflicts),
        )
    return None


RANGE_CHECKS: Tuple[Check, ...] = (check_range_order, check_future_start)

ADMISSION_CHECKS: Tuple[Check, ...] = RANGE_CHECKS + (
    check_property_resolved,
    check_property_bookable,
    check_window,
    check_overlaps,
)


def evaluate(
    request: AdmissionRequest,
    inventory: Optional[Inventory],
    *,
    today: Optional[date] = None,
    checks: Sequence[Check] = ADMISSION_CHECKS,
) -> Optional[Rejection]:
    """Run ``checks`` in order; None means the request is admissible"""
    today = today or today_utc()
    for check in checks:
        rejection = check(request, inventory, today)
        if rejection is not None:
            return rejection
    return None


def evaluate_range(request: AdmissionRequest, *, today: Optional[date] = None) -> Optional[Rejection]:
    """Checks that need no stored data (range order, future start)"""
    return evaluate(request, None, today=today, checks=RANGE_CHECKS)


def ensure_valid_range(request: AdmissionRequest, *, today: Optional[date] = None) -> None:
    rejection = evaluate_range(request, today=today)
    if rejection is not None:
        raise rejection.to_exception()


def admit(request: AdmissionRequest, inventory: Optional[Inventory], *, today: Optional[date] = None) -> DateRange:
    """
    Admit the request or raise

    Returns the admitted DateRange. Raises the DomainError of the first
    failing check.
    """
    rejection = evaluate(request, inventory, today=today)
    if rejection is not None:
        raise rejection.to_exception()
    return request.dates
