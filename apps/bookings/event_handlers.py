"""Domain event handlers for bookings.

Run after the transaction that produced the event has committed; they
record the booking lifecycle in the structured log.
"""

from __future__ import annotations

import structlog

from shared.application.message_bus import MessageBus, message_bus

from .domain.events import BookingCancelled, BookingCreated, BookingUpdated

logger = structlog.get_logger(__name__)


def log_booking_created(event: BookingCreated) -> None:
    logger.info(
        "booking.created",
        booking_id=str(event.booking_id),
        property_id=str(event.property_id),
        user_name=event.user_name,
        **event.dates.to_dict(),
    )


def log_booking_updated(event: BookingUpdated) -> None:
    logger.info(
        "booking.updated",
        booking_id=str(event.booking_id),
        property_id=str(event.property_id),
        previous_property_id=str(event.previous_property_id),
        dates=str(event.dates),
        previous_dates=str(event.previous_dates),
        changed_fields=list(event.changed_fields),
    )


def log_booking_cancelled(event: BookingCancelled) -> None:
    logger.info(
        "booking.cancelled",
        booking_id=str(event.booking_id),
        property_id=str(event.property_id),
        **event.dates.to_dict(),
    )


def register_event_handlers(bus: MessageBus = message_bus) -> None:
    bus.register_event_handler(BookingCreated, log_booking_created)
    bus.register_event_handler(BookingUpdated, log_booking_updated)
    bus.register_event_handler(BookingCancelled, log_booking_cancelled)
