"""
Booking Domain Entities

- Booking: aggregate root for a reservation of a property
- BookingStatus: lifecycle states
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from shared.domain.base import Aggregate, utcnow
from shared.domain.exceptions import ConflictError, InputError
from shared.domain.value_objects import DateRange

from apps.bookings.domain.events import BookingCancelled, BookingCreated, BookingUpdated


class BookingStatus(Enum):
    """
    Booking status

    State transitions:
    - CONFIRMED -> CANCELLED (terminal)

    PENDING is a declared value with no transitions; it is reserved and
    still counts as blocking the dates.
    """
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    PENDING = 'pending'


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - dates.start_date < dates.end_date (enforced by DateRange)
    - user_name is never blank
    - a cancelled booking is never modified again
    """

    property_id: UUID
    user_name: str
    dates: DateRange
    status: BookingStatus = BookingStatus.CONFIRMED
    cancelled_at: datetime | None = None

    def __post_init__(self):
        self.user_name = (self.user_name or '').strip()
        if not self.user_name:
            raise InputError("User name must not be empty")

    @classmethod
    def create(cls, property_id: UUID, user_name: str, dates: DateRange) -> 'Booking':
        """Build a new confirmed booking; call only after admission passed"""
        booking = cls(id=uuid4(), property_id=property_id, user_name=user_name, dates=dates)
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            property_id=property_id,
            user_name=booking.user_name,
            dates=dates,
        ))
        return booking

    @property
    def is_active(self) -> bool:
        """Cancelled bookings never block dates"""
        return self.status != BookingStatus.CANCELLED

    def change(
        self,
        *,
        property_id: UUID | None = None,
        user_name: str | None = None,
        dates: DateRange | None = None,
    ) -> tuple:
        """
        Apply an already-admitted change

        Returns the names of the fields that actually changed.
        """
        if not self.is_active:
            raise ConflictError(
                f"Booking {self.id} is cancelled and cannot be modified",
                kind="booking_cancelled",
            )

        previous_property_id, previous_dates = self.property_id, self.dates
        changed = []

        if property_id is not None and property_id != self.property_id:
            self.property_id = property_id
            changed.append('property_id')
        if user_name is not None:
            user_name = user_name.strip()
            if not user_name:
                raise InputError("User name must not be empty")
            if user_name != self.user_name:
                self.user_name = user_name
                changed.append('user_name')
        if dates is not None and dates != self.dates:
            self.dates = dates
            changed.append('dates')

        if changed:
            self.updated_at = utcnow()
            self.add_event(BookingUpdated(
                aggregate_id=self.id,
                booking_id=self.id,
                property_id=self.property_id,
                dates=self.dates,
                previous_property_id=previous_property_id,
                previous_dates=previous_dates,
                changed_fields=tuple(changed),
            ))
        return tuple(changed)

    def cancel(self) -> bool:
        """
        Cancel booking (CONFIRMED/PENDING -> CANCELLED)

        Cancelling twice is a no-op: returns False and emits nothing.
        """
        if not self.is_active:
            return False

        self.status = BookingStatus.CANCELLED
        self.cancelled_at = utcnow()
        self.updated_at = self.cancelled_at
        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            dates=self.dates,
        ))
        return True

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"
