"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate admission and persistence within a unit of work.

Commands:
- CreateBookingCommand: Admit and store a new booking
- UpdateBookingCommand: Change a booking, re-admitting new dates/property
- CancelBookingCommand: Cancel a booking (idempotent)
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Tuple
from uuid import UUID
import logging

from django.db import DatabaseError

from shared.application.uow import DjangoUnitOfWork
from shared.domain.dates import today_utc
from shared.domain.exceptions import ConflictError, NotFoundError
from apps.bookings.domain.admission import AdmissionRequest, admit, ensure_valid_range
from apps.bookings.domain.entities import Booking

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass(frozen=True)
class CreateBookingCommand:
    property_id: UUID
    user_name: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class BookingChanges:
    """Fields left as ``None`` are absent and keep their persisted value"""
    property_id: Optional[UUID] = None
    user_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in (self.property_id, self.user_name, self.start_date, self.end_date))

    @property
    def touches_admission(self) -> bool:
        """Property or dates changed, so the booking must be admitted again"""
        return any(value is not None for value in (self.property_id, self.start_date, self.end_date))


@dataclass(frozen=True)
class UpdateBookingCommand:
    booking_id: UUID
    changes: BookingChanges


@dataclass(frozen=True)
class CancelBookingCommand:
    booking_id: UUID


def _booking_not_found(booking_id) -> NotFoundError:
    logger.warning(f"Booking with ID {booking_id} not found")
    return NotFoundError(f"Booking with ID {booking_id} not found", kind="booking_not_found")


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Double booking prevention:
    1. Range checks that need no data (start < end, start in the future)
    2. Start unit of work (transaction)
    3. Load Inventory with SELECT FOR UPDATE on the property row
    4. Admission: property exists and is active, window, overlaps
    5. Create Booking aggregate and insert it under the same lock
    6. Commit; BookingCreated is published after commit
    """

    def __init__(self, booking_repo, inventory_repo, uow_factory=DjangoUnitOfWork, clock: Callable[[], date] = today_utc):
        self.booking_repo = booking_repo
        self.inventory_repo = inventory_repo
        self.uow_factory = uow_factory
        self.clock = clock

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Returns: Created Booking aggregate

        Raises:
            InputError: invalid range or start not in the future
            NotFoundError: property does not exist
            ConflictError: property not bookable, outside window, overlap
        """
        logger.info(
            f"Creating booking for property {command.property_id}, "
            f"dates {command.start_date} - {command.end_date}"
        )

        today = self.clock()
        request = AdmissionRequest(
            property_id=command.property_id,
            start_date=command.start_date,
            end_date=command.end_date,
            require_future=True,
        )
        ensure_valid_range(request, today=today)

        try:
            with self.uow_factory() as uow:
                inventory = self.inventory_repo.get_by_property_id(command.property_id, lock=True)
                dates = admit(request, inventory, today=today)

                booking = Booking.create(
                    property_id=command.property_id,
                    user_name=command.user_name,
                    dates=dates,
                )
                inventory.allocate(booking.id, dates)

                self.booking_repo.add(booking)
                uow.collect_events(booking)
        except DatabaseError:
            logger.exception(f"Failed to store booking for property {command.property_id}")
            raise

        logger.info(f"Booking created successfully (ID: {booking.id})")
        return booking


class UpdateBookingHandler:
    """
    Handler for UpdateBooking command

    The booking row is locked first, then the target property row, so
    an update never races a cancel of the same booking. The booking's own
    current range is excluded from the overlap check.
    """

    def __init__(self, booking_repo, inventory_repo, uow_factory=DjangoUnitOfWork, clock: Callable[[], date] = today_utc):
        self.booking_repo = booking_repo
        self.inventory_repo = inventory_repo
        self.uow_factory = uow_factory
        self.clock = clock

    def handle(self, command: UpdateBookingCommand) -> Booking:
        changes = command.changes
        logger.info(f"Updating booking {command.booking_id}")

        try:
            with self.uow_factory() as uow:
                booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
                if booking is None:
                    raise _booking_not_found(command.booking_id)

                if not booking.is_active:
                    raise ConflictError(
                        f"Booking {booking.id} is cancelled and cannot be modified",
                        kind="booking_cancelled",
                    )

                if changes.is_empty:
                    return booking

                dates = None
                if changes.touches_admission:
                    dates = self._admit(booking, changes)

                changed = booking.change(
                    property_id=changes.property_id,
                    user_name=changes.user_name,
                    dates=dates,
                )
                if changed:
                    self.booking_repo.save(booking)
                    uow.collect_events(booking)
        except DatabaseError:
            logger.exception(f"Failed to update booking {command.booking_id}")
            raise

        logger.info(f"Booking {booking.id} updated successfully")
        return booking

    def _admit(self, booking: Booking, changes: BookingChanges):
        """Merge the changes over the persisted booking and admit the result"""
        today = self.clock()
        request = AdmissionRequest(
            property_id=changes.property_id or booking.property_id,
            start_date=changes.start_date or booking.dates.start_date,
            end_date=changes.end_date or booking.dates.end_date,
            require_future=changes.start_date is not None,
            exclude_booking_id=booking.id,
        )
        ensure_valid_range(request, today=today)

        inventory = self.inventory_repo.get_by_property_id(
            request.property_id,
            lock=True,
            exclude_booking_id=booking.id,
        )
        return admit(request, inventory, today=today)


class CancelBookingHandler:
    """Handler for cancelling booking"""

    def __init__(self, booking_repo, uow_factory=DjangoUnitOfWork):
        self.booking_repo = booking_repo
        self.uow_factory = uow_factory

    def handle(self, command: CancelBookingCommand) -> Tuple[Booking, bool]:
        """
        Cancel booking under a lock on its row

        Returns the booking and whether this call cancelled it; a booking
        that is already cancelled is returned unchanged with False.
        """
        logger.info(f"Cancelling booking {command.booking_id}")

        try:
            with self.uow_factory() as uow:
                booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
                if booking is None:
                    raise _booking_not_found(command.booking_id)

                cancelled = booking.cancel()
                if cancelled:
                    self.booking_repo.save(booking)
                    uow.collect_events(booking)
        except DatabaseError:
            logger.exception(f"Failed to cancel booking {command.booking_id}")
            raise

        if cancelled:
            logger.info(f"Booking {booking.id} cancelled successfully")
        else:
            logger.info(f"Booking {booking.id} was already cancelled")
        return booking, cancelled
