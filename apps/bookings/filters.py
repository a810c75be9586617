"""FilterSet definitions for booking listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    propertyId = django_filters.UUIDFilter(field_name="property_id")
    userName = django_filters.CharFilter(field_name="user_name", lookup_expr="icontains")
    # Bookings occupying the given night
    occupiedOn = django_filters.DateFilter(method="filter_occupied_on")

    class Meta:
        model = Booking
        fields = ["status"]

    def filter_occupied_on(self, queryset, name, value):  # type: ignore
        return queryset.filter(start_date__lte=value, end_date__gt=value)
