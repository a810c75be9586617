"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "status",
        "price_per_night",
        "available_from",
        "available_to",
        "created_at",
    )
    list_filter = ("status",)
    search_fields = ("title", "description")
    readonly_fields = ("id", "created_at", "updated_at")
