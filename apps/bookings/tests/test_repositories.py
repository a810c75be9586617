"""Django repositories, unit of work and event publishing."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.dates import today_utc
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
)
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.events import BookingCancelled, BookingCreated
from apps.bookings import event_handlers
from apps.bookings.event_handlers import register_event_handlers
from apps.bookings.infrastructure.repositories import DjangoBookingRepository, DjangoInventoryRepository
from apps.bookings.models import Booking as BookingModel
from apps.bookings.serializers import BookingSerializer
from apps.properties.models import Property

pytestmark = pytest.mark.django_db


@pytest.fixture
def listing():
    return Property.objects.create(
        title="Loft",
        description="Open plan loft",
        price_per_night=Decimal("95.00"),
        available_from=date(2025, 3, 1),
        available_to=date(2025, 11, 30),
    )


def test_inventory_for_unknown_property_is_none():
    assert DjangoInventoryRepository().get_by_property_id(uuid4(), lock=True) is None


def test_inventory_skips_cancelled_and_excluded(listing):
    kept = BookingModel.objects.create(property=listing, user_name="Ada", start_date=date(2025, 4, 1), end_date=date(2025, 4, 3))
    excluded = BookingModel.objects.create(property=listing, user_name="Grace", start_date=date(2025, 3, 5), end_date=date(2025, 3, 7))
    BookingModel.objects.create(
        property=listing,
        user_name="Linus",
        start_date=date(2025, 5, 1),
        end_date=date(2025, 5, 3),
        status=BookingModel.Status.CANCELLED,
    )
    repo = DjangoInventoryRepository()

    inventory = repo.get_by_property_id(listing.pk, exclude_booking_id=excluded.pk)

    assert inventory.window == DateRange(date(2025, 3, 1), date(2025, 11, 30))
    assert [allocation.booking_id for allocation in inventory.allocations] == [kept.pk]
    assert [row.pk for row in repo.list_active_bookings(listing.pk)] == [excluded.pk, kept.pk]


def test_booking_round_trip(listing):
    repo = DjangoBookingRepository()
    booking = Booking.create(listing.pk, "Ada", DateRange(date(2025, 4, 1), date(2025, 4, 3)))

    repo.add(booking)
    loaded = repo.get_by_id(booking.id, lock=False)
    loaded.cancel()
    repo.save(loaded)

    row = repo.get_model(str(booking.id))
    assert row.status == BookingModel.Status.CANCELLED
    assert row.cancelled_at is not None
    assert repo.get_by_id(booking.id).status is BookingStatus.CANCELLED


def test_get_model_unknown():
    with pytest.raises(NotFoundError):
        DjangoBookingRepository().get_model(uuid4())


def test_events_are_published_after_commit(listing, django_capture_on_commit_callbacks):
    bus = MessageBus()
    received = []
    bus.register_event_handler(BookingCreated, received.append)
    bus.register_event_handler(BookingCancelled, received.append)
    Property.objects.filter(pk=listing.pk).update(available_from=today_utc(), available_to=today_utc() + timedelta(days=60))
    booking_repo, inventory_repo = DjangoBookingRepository(), DjangoInventoryRepository()
    uow_factory = lambda: DjangoUnitOfWork(bus=bus)  # noqa: E731

    with django_capture_on_commit_callbacks(execute=True):
        booking = CreateBookingHandler(booking_repo, inventory_repo, uow_factory=uow_factory).handle(
            CreateBookingCommand(
                property_id=listing.pk,
                user_name="Ada",
                start_date=today_utc() + timedelta(days=1),
                end_date=today_utc() + timedelta(days=4),
            )
        )
    with django_capture_on_commit_callbacks(execute=True):
        CancelBookingHandler(booking_repo, uow_factory=uow_factory).handle(CancelBookingCommand(booking_id=booking.id))
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        CancelBookingHandler(booking_repo, uow_factory=uow_factory).handle(CancelBookingCommand(booking_id=booking.id))

    assert [type(event) for event in received] == [BookingCreated, BookingCancelled]
    assert callbacks == []


def test_failed_unit_of_work_publishes_nothing(django_capture_on_commit_callbacks):
    bus = MessageBus()
    received = []
    bus.register_event_handler(BookingCreated, received.append)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with DjangoUnitOfWork(bus=bus) as uow:
                uow.collect_events(Booking.create(uuid4(), "Ada", DateRange(date(2025, 4, 1), date(2025, 4, 3))))
                raise RuntimeError("boom")

    assert callbacks == []
    assert received == []


def test_registered_handlers_log_the_booking_lifecycle(listing, monkeypatch):
    bus = MessageBus()
    register_event_handlers(bus)
    lines = []
    monkeypatch.setattr(event_handlers, "logger", SimpleNamespace(info=lambda event, **kw: lines.append((event, kw))))
    booking = Booking.create(listing.pk, "Ada", DateRange(date(2025, 4, 1), date(2025, 4, 3)))
    booking.cancel()

    bus.publish_events(booking.events)

    assert [event for event, _ in lines] == ["booking.created", "booking.cancelled"]
    assert lines[0][1]["startDate"] == "2025-04-01"


def test_booking_serializer_renders_nights(listing):
    row = BookingModel.objects.create(property=listing, user_name="Ada", start_date=date(2025, 4, 1), end_date=date(2025, 4, 4))

    data = BookingSerializer(DjangoBookingRepository().get_model(row.pk)).data

    assert data["nights"] == 3
    assert data["property"]["id"] == str(listing.pk)
