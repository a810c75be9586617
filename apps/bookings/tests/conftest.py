"""In-memory repositories and unit of work for the booking command handlers."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from datetime import date
from uuid import UUID, uuid4

import pytest

from shared.application.uow import AbstractUnitOfWork
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange

from apps.bookings.application.command_handlers import (
    CancelBookingHandler,
    CreateBookingHandler,
    UpdateBookingHandler,
)
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.inventory import Allocation, Inventory

TODAY = date(2025, 1, 15)


@dataclass
class PropertyRecord:
    id: UUID
    window: DateRange
    status: str = "active"


class InMemoryStore:
    """Shared state plus per-row locks held until the unit of work exits."""

    def __init__(self):
        self.properties: dict[UUID, PropertyRecord] = {}
        self.bookings: dict[UUID, Booking] = {}
        self.published: list = []
        self._locks: dict[tuple, threading.Lock] = {}
        self._guard = threading.Lock()
        self._local = threading.local()

    def held(self) -> list:
        if not hasattr(self._local, "held"):
            self._local.held = []
        return self._local.held

    def lock(self, key: tuple) -> None:
        held = self.held()
        if key in held:
            return
        with self._guard:
            row_lock = self._locks.setdefault(key, threading.Lock())
        row_lock.acquire()
        held.append(key)

    def release_all(self) -> None:
        held = self.held()
        while held:
            self._locks[held.pop()].release()


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: InMemoryStore):
        self.store = store
        self._events: list = []

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            self.store.release_all()

    def commit(self):
        self.store.published.extend(self._events)
        self._events = []

    def rollback(self):
        self._events = []

    def collect_events(self, aggregate):
        self._events.extend(aggregate.events)
        aggregate.clear_events()


class InMemoryInventoryRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def get_by_property_id(self, property_id, *, lock=False, exclude_booking_id=None):
        if lock:
            self.store.lock(("property", property_id))
        record = self.store.properties.get(property_id)
        if record is None:
            return None
        allocations = [
            Allocation(booking_id=booking.id, dates=booking.dates)
            for booking in self.store.bookings.values()
            if booking.property_id == property_id and booking.is_active and booking.id != exclude_booking_id
        ]
        return Inventory(
            property_id=record.id,
            window=record.window,
            property_status=record.status,
            allocations=allocations,
        )


def _snapshot(booking):
    stored = copy.deepcopy(booking)
    stored.clear_events()
    return stored


class InMemoryBookingRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def get_by_id(self, booking_id, *, lock=False):
        if lock:
            self.store.lock(("booking", booking_id))
        booking = self.store.bookings.get(booking_id)
        return copy.deepcopy(booking) if booking is not None else None

    def add(self, booking):
        self.store.bookings[booking.id] = _snapshot(booking)

    def save(self, booking):
        if booking.id not in self.store.bookings:
            raise NotFoundError(f"Booking with ID {booking.id} not found")
        self.store.bookings[booking.id] = _snapshot(booking)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def booking_repo(store):
    return InMemoryBookingRepository(store)


@pytest.fixture
def inventory_repo(store):
    return InMemoryInventoryRepository(store)


@pytest.fixture
def uow_factory(store):
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def add_property(store):
    def _add(available_from=date(2025, 3, 1), available_to=date(2025, 11, 30), status="active"):
        record = PropertyRecord(id=uuid4(), window=DateRange(available_from, available_to), status=status)
        store.properties[record.id] = record
        return record

    return _add


@pytest.fixture
def add_booking(store):
    """Store a booking directly, bypassing admission."""

    def _add(property_id, start, end, user_name="Ada", status=BookingStatus.CONFIRMED):
        booking = Booking(property_id=property_id, user_name=user_name, dates=DateRange(start, end), status=status)
        store.bookings[booking.id] = booking
        return booking

    return _add


@pytest.fixture
def create_handler(booking_repo, inventory_repo, uow_factory):
    return CreateBookingHandler(booking_repo, inventory_repo, uow_factory=uow_factory, clock=lambda: TODAY)


@pytest.fixture
def update_handler(booking_repo, inventory_repo, uow_factory):
    return UpdateBookingHandler(booking_repo, inventory_repo, uow_factory=uow_factory, clock=lambda: TODAY)


@pytest.fixture
def cancel_handler(booking_repo, uow_factory):
    return CancelBookingHandler(booking_repo, uow_factory=uow_factory)
