"""
Booking Domain Events

Published after the transaction that produced them commits.
"""

from dataclasses import dataclass, field
from typing import Tuple
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """A booking passed admission and was stored"""
    booking_id: UUID
    property_id: UUID
    user_name: str
    dates: DateRange


@dataclass(kw_only=True)
class BookingUpdated(DomainEvent):
    """
    Dates, property or guest name of a booking changed

    ``previous_dates``/``previous_property_id`` hold the state before the change.
    """
    booking_id: UUID
    property_id: UUID
    dates: DateRange
    previous_property_id: UUID
    previous_dates: DateRange
    changed_fields: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """A booking left the confirmed state; its dates are free again"""
    booking_id: UUID
    property_id: UUID
    dates: DateRange
