"""Admission pipeline, inventory and booking aggregate rules."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from shared.domain.exceptions import (
    ConflictError,
    InputError,
    InvalidDateRangeError,
    NotFoundError,
    OverlapConflictError,
)
from shared.domain.value_objects import DateRange

from apps.bookings.domain.admission import (
    AdmissionRequest,
    RejectionKind,
    admit,
    evaluate,
    evaluate_range,
)
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.events import BookingCancelled, BookingCreated, BookingUpdated
from apps.bookings.domain.inventory import Allocation, Inventory

TODAY = date(2025, 1, 15)


def _inventory(*ranges, status="active", window=(date(2025, 3, 1), date(2025, 11, 30))):
    return Inventory(
        property_id=uuid4(),
        window=DateRange(*window),
        property_status=status,
        allocations=[Allocation(booking_id=uuid4(), dates=DateRange(start, end)) for start, end in ranges],
    )


def _request(inventory, start, end, **kwargs):
    return AdmissionRequest(property_id=inventory.property_id, start_date=start, end_date=end, **kwargs)


def test_range_order_is_checked_first():
    inventory = _inventory(status="archived")
    rejection = evaluate(_request(inventory, date(2025, 12, 5), date(2025, 12, 1)), None, today=TODAY)

    assert rejection.kind is RejectionKind.INVALID_RANGE
    assert isinstance(rejection.to_exception(), InvalidDateRangeError)


def test_future_start_precedes_property_lookup():
    request = AdmissionRequest(property_id=uuid4(), start_date=TODAY, end_date=date(2025, 1, 20))

    rejection = evaluate(request, None, today=TODAY)

    assert rejection.kind is RejectionKind.START_NOT_IN_FUTURE
    assert isinstance(rejection.to_exception(), InputError)


def test_future_start_can_be_waived():
    request = AdmissionRequest(property_id=uuid4(), start_date=TODAY, end_date=date(2025, 1, 20), require_future=False)

    assert evaluate_range(request, today=TODAY) is None


def test_missing_inventory_is_not_found():
    request = AdmissionRequest(property_id=uuid4(), start_date=date(2025, 3, 2), end_date=date(2025, 3, 4))

    error = evaluate(request, None, today=TODAY).to_exception()

    assert isinstance(error, NotFoundError)
    assert str(request.property_id) in error.message


@pytest.mark.parametrize("status", ["inactive", "archived"])
def test_non_active_property_is_not_bookable(status):
    inventory = _inventory(status=status)

    rejection = evaluate(_request(inventory, date(2025, 3, 2), date(2025, 3, 4)), inventory, today=TODAY)

    assert rejection.kind is RejectionKind.PROPERTY_NOT_BOOKABLE


@pytest.mark.parametrize(
    "start,end",
    [
        (date(2025, 12, 1), date(2025, 12, 5)),
        (date(2025, 2, 27), date(2025, 3, 3)),
        (date(2025, 11, 28), date(2025, 12, 2)),
    ],
)
def test_outside_window(start, end):
    inventory = _inventory()

    error = evaluate(_request(inventory, start, end), inventory, today=TODAY).to_exception()

    assert isinstance(error, ConflictError)
    assert error.kind == "outside_window"
    assert error.message == (
        "Booking dates must be within the property's availability range: 2025-03-01 to 2025-11-30"
    )


def test_window_bounds_are_inclusive():
    inventory = _inventory()

    dates = admit(_request(inventory, date(2025, 3, 1), date(2025, 11, 30)), inventory, today=TODAY)

    assert dates == DateRange(date(2025, 3, 1), date(2025, 11, 30))


def test_window_is_checked_before_overlap():
    inventory = _inventory((date(2025, 11, 20), date(2025, 11, 30)))

    rejection = evaluate(_request(inventory, date(2025, 11, 25), date(2025, 12, 2)), inventory, today=TODAY)

    assert rejection.kind is RejectionKind.OUTSIDE_WINDOW


def test_back_to_back_is_not_overlap():
    inventory = _inventory((date(2025, 3, 10), date(2025, 3, 15)))

    assert evaluate(_request(inventory, date(2025, 3, 15), date(2025, 3, 18)), inventory, today=TODAY) is None
    assert evaluate(_request(inventory, date(2025, 3, 7), date(2025, 3, 10)), inventory, today=TODAY) is None


def test_overlap_rejection_lists_conflicts_in_order():
    inventory = _inventory(
        (date(2025, 4, 1), date(2025, 4, 5)),
        (date(2025, 3, 10), date(2025, 3, 15)),
        (date(2025, 3, 20), date(2025, 3, 25)),
    )

    with pytest.raises(OverlapConflictError) as exc_info:
        admit(_request(inventory, date(2025, 3, 1), date(2025, 4, 2)), inventory, today=TODAY)

    assert [overlap["startDate"] for overlap in exc_info.value.overlaps] == [
        "2025-03-10",
        "2025-03-20",
        "2025-04-01",
    ]
    assert exc_info.value.requested == {"startDate": "2025-03-01", "endDate": "2025-04-02"}


def test_excluded_booking_is_ignored():
    inventory = _inventory((date(2025, 3, 10), date(2025, 3, 15)))
    own_id = inventory.allocations[0].booking_id

    request = _request(inventory, date(2025, 3, 12), date(2025, 3, 17), exclude_booking_id=own_id)

    assert evaluate(request, inventory, today=TODAY) is None


def test_inventory_allocate_refuses_conflicts():
    inventory = _inventory((date(2025, 3, 10), date(2025, 3, 15)))

    with pytest.raises(ValueError):
        inventory.allocate(uuid4(), DateRange(date(2025, 3, 14), date(2025, 3, 16)))

    inventory.allocate(uuid4(), DateRange(date(2025, 3, 15), date(2025, 3, 16)))
    assert inventory.booked_ranges() == [
        DateRange(date(2025, 3, 10), date(2025, 3, 15)),
        DateRange(date(2025, 3, 15), date(2025, 3, 16)),
    ]


def test_inventory_reallocation_replaces_previous_range():
    inventory = _inventory((date(2025, 3, 10), date(2025, 3, 15)))
    booking_id = inventory.allocations[0].booking_id

    inventory.allocate(booking_id, DateRange(date(2025, 3, 12), date(2025, 3, 18)))

    assert inventory.booked_ranges() == [DateRange(date(2025, 3, 12), date(2025, 3, 18))]
    assert inventory.deallocate(booking_id) is True
    assert inventory.deallocate(booking_id) is False


def test_booking_lifecycle_events():
    booking = Booking.create(uuid4(), "Ada", DateRange(date(2025, 3, 10), date(2025, 3, 15)))
    assert [type(event) for event in booking.events] == [BookingCreated]
    booking.clear_events()

    assert booking.change(user_name="Ada") == ()
    assert booking.change(dates=DateRange(date(2025, 3, 11), date(2025, 3, 15))) == ("dates",)
    assert booking.cancel() is True
    assert booking.cancel() is False
    assert [type(event) for event in booking.events] == [BookingUpdated, BookingCancelled]
    assert booking.status is BookingStatus.CANCELLED

    with pytest.raises(ConflictError):
        booking.change(user_name="Grace")


def test_booking_requires_user_name():
    with pytest.raises(InputError):
        Booking.create(uuid4(), "   ", DateRange(date(2025, 3, 10), date(2025, 3, 15)))
