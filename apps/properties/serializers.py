"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.fields import FlexibleDateField

from .models import Property
from .services import PropertyChanges, PropertyDraft, get_availability


class PropertySerializer(serializers.ModelSerializer):
    pricePerNight = serializers.DecimalField(source="price_per_night", max_digits=10, decimal_places=2, coerce_to_string=False)
    availableFrom = FlexibleDateField(source="available_from")
    availableTo = FlexibleDateField(source="available_to")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "description",
            "pricePerNight",
            "availableFrom",
            "availableTo",
            "status",
            "createdAt",
            "updatedAt",
        ]


class PropertyDetailSerializer(PropertySerializer):
    bookedDates = serializers.SerializerMethodField()

    class Meta(PropertySerializer.Meta):
        fields = PropertySerializer.Meta.fields + ["bookedDates"]

    def get_bookedDates(self, obj: Property) -> list[dict[str, str]]:
        return get_availability(obj)["bookedDates"]


class PropertyWriteSerializer(serializers.Serializer):
    """Create and partial-update payload; range rules live in the service layer."""

    title = serializers.CharField(max_length=255)
    description = serializers.CharField(max_length=1000)
    pricePerNight = serializers.DecimalField(max_digits=10, decimal_places=2)
    availableFrom = FlexibleDateField()
    availableTo = FlexibleDateField()
    status = serializers.ChoiceField(choices=Property.Status.choices, required=False)

    def to_draft(self) -> PropertyDraft:
        data = self.validated_data
        return PropertyDraft(
            title=data["title"],
            description=data["description"],
            price_per_night=data["pricePerNight"],
            available_from=data["availableFrom"],
            available_to=data["availableTo"],
            status=data.get("status", Property.Status.ACTIVE),
        )

    def to_changes(self) -> PropertyChanges:
        data = self.validated_data
        return PropertyChanges(
            title=data.get("title"),
            description=data.get("description"),
            price_per_night=data.get("pricePerNight"),
            available_from=data.get("availableFrom"),
            available_to=data.get("availableTo"),
            status=data.get("status"),
        )