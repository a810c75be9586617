"""Property store operations.

Creation and partial update validate the availability window and price
before anything is written; a partial update checks each supplied bound
against the other supplied bound, or the persisted one when absent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Any

from django.db import transaction  # type: ignore

from shared.domain.dates import is_ordered, to_canonical
from shared.domain.exceptions import InputError, NotFoundError
from shared.domain.identifiers import parse_identifier

from .models import Property

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyDraft:
    title: str
    description: str
    price_per_night: Decimal
    available_from: date
    available_to: date
    status: str = Property.Status.ACTIVE


@dataclass(frozen=True)
class PropertyChanges:
    """Fields left as ``None`` are absent and keep their persisted value."""

    title: str | None = None
    description: str | None = None
    price_per_night: Decimal | None = None
    available_from: date | None = None
    available_to: date | None = None
    status: str | None = None

    def present(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def _ensure_positive_price(price: Decimal) -> None:
    if price is None or price <= 0:
        raise InputError("Price per night must be a positive number")


def _ensure_window(available_from: date, available_to: date, message: str) -> None:
    if not is_ordered(available_from, available_to):
        raise InputError(message, kind="invalid_window")


def get_property(property_id) -> Property:
    pk = parse_identifier(property_id, "property")
    try:
        return Property.objects.get(pk=pk)
    except Property.DoesNotExist:
        logger.warning(f"Property with ID {pk} not found")
        raise NotFoundError(f"Property with ID {pk} not found", kind="property_not_found") from None


def list_properties(status: str | None = None):
    queryset = Property.objects.all()
    if status:
        queryset = queryset.filter(status=status)
    return queryset


def create_property(draft: PropertyDraft) -> Property:
    logger.info("Creating new property")
    _ensure_window(draft.available_from, draft.available_to, "Available from date must be before available to date")
    _ensure_positive_price(draft.price_per_night)

    property_obj = Property.objects.create(
        title=draft.title.strip(),
        description=draft.description.strip(),
        price_per_night=draft.price_per_night,
        available_from=draft.available_from,
        available_to=draft.available_to,
        status=draft.status,
    )
    logger.info(f"Successfully created property with ID: {property_obj.id}")
    return property_obj


def update_property(property_obj: Property, changes: PropertyChanges) -> Property:
    logger.info(f"Updating property with ID: {property_obj.id}")

    if changes.available_from is not None and changes.available_to is not None:
        _ensure_window(
            changes.available_from,
            changes.available_to,
            "Available from date must be before available to date",
        )
    elif changes.available_from is not None:
        _ensure_window(
            changes.available_from,
            property_obj.available_to,
            "Available from date must be before existing available to date",
        )
    elif changes.available_to is not None:
        _ensure_window(
            property_obj.available_from,
            changes.available_to,
            "Available to date must be after existing available from date",
        )

    if changes.price_per_night is not None:
        _ensure_positive_price(changes.price_per_night)

    values = changes.present()
    if not values:
        return property_obj

    for name, value in values.items():
        setattr(property_obj, name, value.strip() if isinstance(value, str) and name != "status" else value)

    with transaction.atomic():
        property_obj.save(update_fields=[*values.keys(), "updated_at"])

    logger.info(f"Successfully updated property with ID: {property_obj.id}")
    return property_obj


def archive_property(property_obj: Property) -> bool:
    """Archive instead of deleting; returns False when already archived."""
    archived = property_obj.archive()
    if archived:
        logger.info(f"Archived property with ID: {property_obj.id}")
    return archived


def get_availability(property_obj: Property) -> dict[str, Any]:
    from apps.bookings.infrastructure.repositories import DjangoInventoryRepository

    booked = DjangoInventoryRepository().booked_ranges(property_obj.pk)
    return {
        "availableFrom": to_canonical(property_obj.available_from),
        "availableTo": to_canonical(property_obj.available_to),
        "bookedDates": [dates.to_dict() for dates in booked],
    }
