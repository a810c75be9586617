"""
Booking Store

Django ORM repositories translating between the booking tables and the
domain aggregates (Booking, Inventory).

Locking:
- ``DjangoInventoryRepository.get_by_property_id(lock=True)`` locks the
  property row, which serializes admissions for one property
- ``DjangoBookingRepository.get_by_id(lock=True)`` locks the booking row

Locks are only taken inside ``transaction.atomic()`` (a unit of work) and
are released when it ends.
"""

from typing import List, Optional
from uuid import UUID
import logging

from django.db import NotSupportedError, transaction

from shared.domain.exceptions import NotFoundError
from shared.domain.identifiers import parse_identifier
from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.inventory import Allocation, Inventory
from apps.bookings.models import Booking as BookingModel
from apps.properties.models import Property as PropertyModel

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _active_bookings(property_id, exclude_booking_id=None):
    queryset = BookingModel.objects.filter(
        property_id=property_id,
        status__in=BookingModel.ACTIVE_STATUSES,
    )
    if exclude_booking_id is not None:
        queryset = queryset.exclude(pk=exclude_booking_id)
    return queryset.order_by('start_date', 'end_date', 'id')


class DjangoInventoryRepository:
    """Loads the Inventory of a property from the property and booking tables"""

    def get_by_property_id(
        self,
        property_id: UUID,
        *,
        lock: bool = False,
        exclude_booking_id: Optional[UUID] = None,
    ) -> Optional[Inventory]:
        """
        Inventory snapshot for a property, or None if it does not exist

        With ``lock=True`` the property row is locked first so the active
        bookings read afterwards cannot change until the transaction ends.
        """
        queryset = PropertyModel.objects.filter(pk=property_id)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)

        property_model = queryset.first()
        if property_model is None:
            return None

        allocations = [
            Allocation(booking_id=row.pk, dates=DateRange(row.start_date, row.end_date))
            for row in _active_bookings(property_model.pk, exclude_booking_id)
        ]
        return Inventory(
            property_id=property_model.pk,
            window=property_model.window,
            property_status=property_model.status,
            allocations=allocations,
        )

    def list_active_bookings(self, property_id: UUID, exclude_booking_id: Optional[UUID] = None) -> List[BookingModel]:
        """Non-cancelled bookings of a property, ascending by (start, end)"""
        return list(_active_bookings(property_id, exclude_booking_id))

    def booked_ranges(self, property_id: UUID) -> List[DateRange]:
        return [DateRange(row.start_date, row.end_date) for row in self.list_active_bookings(property_id)]


class DjangoBookingRepository:
    """Persists Booking aggregates"""

    def get_by_id(self, booking_id: UUID, *, lock: bool = False) -> Optional[Booking]:
        queryset = BookingModel.objects.filter(pk=booking_id)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)

        model = queryset.first()
        if model is None:
            return None
        return self._to_domain(model)

    def add(self, booking: Booking) -> BookingModel:
        model = BookingModel.objects.create(
            id=booking.id,
            property_id=booking.property_id,
            user_name=booking.user_name,
            start_date=booking.dates.start_date,
            end_date=booking.dates.end_date,
            status=booking.status.value,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
        )
        logger.debug(f"Inserted booking row {model.pk}")
        return model

    def save(self, booking: Booking) -> None:
        updated = BookingModel.objects.filter(pk=booking.id).update(
            property_id=booking.property_id,
            user_name=booking.user_name,
            start_date=booking.dates.start_date,
            end_date=booking.dates.end_date,
            status=booking.status.value,
            cancelled_at=booking.cancelled_at,
            updated_at=booking.updated_at,
        )
        if not updated:
            raise NotFoundError(f"Booking with ID {booking.id} not found", kind="booking_not_found")

    def get_model(self, booking_id) -> BookingModel:
        """ORM row with its property, for rendering responses"""
        pk = parse_identifier(booking_id, "booking")
        try:
            return BookingModel.objects.select_related('property').get(pk=pk)
        except BookingModel.DoesNotExist:
            logger.warning(f"Booking with ID {pk} not found")
            raise NotFoundError(f"Booking with ID {pk} not found", kind="booking_not_found") from None

    def list_models(self):
        return BookingModel.objects.select_related('property')

    @staticmethod
    def _to_domain(model: BookingModel) -> Booking:
        return Booking(
            id=model.pk,
            created_at=model.created_at,
            updated_at=model.updated_at,
            property_id=model.property_id,
            user_name=model.user_name,
            dates=DateRange(model.start_date, model.end_date),
            status=BookingStatus(model.status),
            cancelled_at=model.cancelled_at,
        )
