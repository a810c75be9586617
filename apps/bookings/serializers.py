"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.fields import FlexibleDateField

from apps.properties.models import Property

from .application.command_handlers import BookingChanges, CreateBookingCommand
from .models import Booking


class PropertySummarySerializer(serializers.ModelSerializer):
    pricePerNight = serializers.DecimalField(source="price_per_night", max_digits=10, decimal_places=2, coerce_to_string=False)
    availableFrom = FlexibleDateField(source="available_from")
    availableTo = FlexibleDateField(source="available_to")

    class Meta:
        model = Property
        fields = ["id", "title", "pricePerNight", "availableFrom", "availableTo", "status"]


class BookingSerializer(serializers.ModelSerializer):
    """Read representation with the booked property embedded."""

    propertyId = serializers.UUIDField(source="property_id", read_only=True)
    userName = serializers.CharField(source="user_name", read_only=True)
    startDate = FlexibleDateField(source="start_date", read_only=True)
    endDate = FlexibleDateField(source="end_date", read_only=True)
    nights = serializers.SerializerMethodField()
    property = PropertySummarySerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "propertyId",
            "userName",
            "startDate",
            "endDate",
            "nights",
            "status",
            "property",
            "createdAt",
            "updatedAt",
            "cancelledAt",
        ]

    def get_nights(self, obj: Booking) -> int:
        return (obj.end_date - obj.start_date).days


class BookingWriteSerializer(serializers.Serializer):
    """Create and update payload; admission rules live in the command handlers."""

    propertyId = serializers.UUIDField()
    userName = serializers.CharField(max_length=255)
    startDate = FlexibleDateField()
    endDate = FlexibleDateField()

    def to_command(self) -> CreateBookingCommand:
        data = self.validated_data
        return CreateBookingCommand(
            property_id=data["propertyId"],
            user_name=data["userName"],
            start_date=data["startDate"],
            end_date=data["endDate"],
        )

    def to_changes(self) -> BookingChanges:
        data = self.validated_data
        return BookingChanges(
            property_id=data.get("propertyId"),
            user_name=data.get("userName"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )
