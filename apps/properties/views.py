"""Property API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.infrastructure import responses

from .filters import PropertyFilterSet
from .models import Property
from .permissions import IsAdminOrReadOnly
from .serializers import PropertyDetailSerializer, PropertySerializer, PropertyWriteSerializer
from .services import (
    archive_property,
    create_property,
    get_availability,
    get_property,
    list_properties,
    update_property,
)


class PropertyViewSet(viewsets.GenericViewSet):
    """Listing, details, availability and admin management of properties."""

    queryset = Property.objects.all()
    serializer_class = PropertySerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PropertyFilterSet
    list_message = "Properties retrieved successfully"

    def get_queryset(self):  # type: ignore
        return list_properties()

    def get_object(self):  # type: ignore
        property_obj = get_property(self.kwargs["pk"])
        self.check_object_permissions(self.request, property_obj)
        return property_obj

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = PropertySerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        return responses.success(
            "Property successfully retrieved",
            PropertyDetailSerializer(property_obj).data,
        )

    def create(self, request):  # type: ignore
        serializer = PropertyWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        property_obj = create_property(serializer.to_draft())
        return responses.created("Property created successfully", PropertySerializer(property_obj).data)

    def update(self, request, pk=None, partial=True):  # type: ignore
        property_obj = self.get_object()
        serializer = PropertyWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        property_obj = update_property(property_obj, serializer.to_changes())
        return responses.success("Property updated successfully", PropertySerializer(property_obj).data)

    def partial_update(self, request, pk=None):  # type: ignore
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        if archive_property(property_obj):
            message = "Property archived successfully"
        else:
            message = "Property is already archived"
        return responses.success(message, PropertySerializer(property_obj).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        return responses.success("Property availability retrieved successfully", get_availability(property_obj))
