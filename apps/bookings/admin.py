"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "user_name",
        "status",
        "start_date",
        "end_date",
        "created_at",
    )
    list_filter = ("status", "start_date", "end_date")
    search_fields = ("user_name", "property__title")
    list_select_related = ("property",)
    readonly_fields = (
        "id",
        "created_at",
        "updated_at",
        "cancelled_at",
    )
