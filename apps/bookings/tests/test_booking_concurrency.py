"""Concurrent admissions against the real database."""

from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import DatabaseError, connection

from shared.domain.dates import today_utc
from shared.domain.exceptions import OverlapConflictError

from apps.bookings.application.command_handlers import CreateBookingCommand, CreateBookingHandler
from apps.bookings.domain.entities import Booking
from apps.bookings.infrastructure.repositories import DjangoBookingRepository, DjangoInventoryRepository
from apps.bookings.models import Booking as BookingModel
from apps.properties.models import Property


@pytest.mark.django_db(transaction=True)
def test_concurrent_overlapping_creates_on_database_admit_exactly_one():
    today = today_utc()
    listing = Property.objects.create(
        title="Loft",
        description="Open plan loft",
        price_per_night=Decimal("95.00"),
        available_from=today,
        available_to=today + timedelta(days=60),
    )
    handler = CreateBookingHandler(DjangoBookingRepository(), DjangoInventoryRepository())
    barrier = threading.Barrier(2)
    results: list = []

    def attempt(first_night, last_night):
        barrier.wait()
        try:
            results.append(
                handler.handle(
                    CreateBookingCommand(
                        property_id=listing.pk,
                        user_name=f"Guest {first_night}",
                        start_date=today + timedelta(days=first_night),
                        end_date=today + timedelta(days=last_night),
                    )
                )
            )
        except (OverlapConflictError, DatabaseError) as exc:
            results.append(exc)
        finally:
            connection.close()

    threads = [
        threading.Thread(target=attempt, args=(1, 5)),
        threading.Thread(target=attempt, args=(3, 8)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert len(results) == 2, results
    assert sum(isinstance(result, Booking) for result in results) == 1, results
    assert sum(isinstance(result, OverlapConflictError) for result in results) == 1, results
    assert BookingModel.objects.filter(property=listing).count() == 1
