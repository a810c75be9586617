"""API views for the booking domain."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.domain.identifiers import parse_identifier
from shared.infrastructure import responses

from .application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBookingHandler,
    UpdateBookingCommand,
    UpdateBookingHandler,
)
from .filters import BookingFilterSet
from .infrastructure.repositories import DjangoBookingRepository, DjangoInventoryRepository
from .models import Booking
from .serializers import BookingSerializer, BookingWriteSerializer


class BookingViewSet(viewsets.GenericViewSet):
    """Viewset for creating, changing and cancelling bookings."""

    queryset = Booking.objects.select_related("property").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet
    list_message = "Bookings retrieved successfully"

    booking_repo = DjangoBookingRepository()
    inventory_repo = DjangoInventoryRepository()

    def get_queryset(self):  # type: ignore
        return self.booking_repo.list_models()

    def get_object(self):  # type: ignore
        booking = self.booking_repo.get_model(self.kwargs["pk"])
        self.check_object_permissions(self.request, booking)
        return booking

    def _render(self, booking_id):
        return BookingSerializer(self.booking_repo.get_model(booking_id)).data

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = BookingSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):  # type: ignore
        return responses.success("Booking retrieved successfully", BookingSerializer(self.get_object()).data)

    def create(self, request):  # type: ignore
        serializer = BookingWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        handler = CreateBookingHandler(self.booking_repo, self.inventory_repo)
        booking = handler.handle(serializer.to_command())
        return responses.created("Booking created successfully", self._render(booking.id))

    def update(self, request, pk=None, partial=True):  # type: ignore
        booking_id = parse_identifier(pk, "booking")
        serializer = BookingWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        handler = UpdateBookingHandler(self.booking_repo, self.inventory_repo)
        booking = handler.handle(UpdateBookingCommand(booking_id=booking_id, changes=serializer.to_changes()))
        return responses.success("Booking updated successfully", self._render(booking.id))

    def partial_update(self, request, pk=None):  # type: ignore
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):  # type: ignore
        booking_id = parse_identifier(pk, "booking")
        booking, cancelled = CancelBookingHandler(self.booking_repo).handle(CancelBookingCommand(booking_id=booking_id))
        message = "Booking cancelled successfully" if cancelled else "Booking is already cancelled"
        return responses.success(message, self._render(booking.id))

    @action(detail=False, methods=["get"])
    def count(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        return responses.success("Bookings counted successfully", {"count": queryset.count()})
