"""API viewsets for bookings."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from cars.directory import get_car
from core.context import AuthContext
from core.permissions import HasRole
from users.models import User

from . import services
from .domain import has_conflict
from .filters import BookingFilter
from .serializers import (
    AvailabilityQuerySerializer,
    BookingDecisionSerializer,
    BookingSerializer,
    BookingWriteSerializer,
)

logger = logging.getLogger(__name__)

UUID_REGEX = "[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


class BookingViewSet(viewsets.GenericViewSet):
    """Booking requests, owner decisions and booking history."""

    serializer_class = BookingSerializer
    permission_classes = (permissions.IsAuthenticated,)
    filterset_class = BookingFilter
    ordering_fields = ("start_date", "end_date", "created_at", "total_price")
    lookup_value_regex = UUID_REGEX

    def _ctx(self) -> AuthContext:
        return AuthContext.from_request(self.request)

    def get_queryset(self):
        """Restrict bookings to those the caller may see."""
        return services.list_bookings(self._ctx())

    def _respond(self, booking, status_code=status.HTTP_200_OK) -> Response:
        return Response(self.get_serializer(booking).data, status=status_code)

    def _respond_many(self, queryset) -> Response:
        return Response(self.get_serializer(queryset, many=True).data)

    def list(self, request, *args, **kwargs):
        return self._respond_many(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request, *args, **kwargs):
        booking = services.get_booking(self._ctx(), kwargs["pk"])
        return self._respond(booking)

    def create(self, request, *args, **kwargs):
        """Request a booking (renters only)."""
        payload = BookingWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = services.create_booking(self._ctx(), **payload.validated_data)
        return self._respond(booking, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Change car and dates of a pending booking (renter only)."""
        payload = BookingWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = services.update_booking(self._ctx(), kwargs["pk"], **payload.validated_data)
        return self._respond(booking)

    def destroy(self, request, *args, **kwargs):
        """Cancel a pending booking; returns the booking as it stood at cancellation."""
        booking = services.cancel_booking(self._ctx(), kwargs["pk"])
        return self._respond(booking)

    @action(detail=True, methods=["put"], url_path="accept-or-reject")
    def accept_or_reject(self, request, *args, **kwargs):
        """Accept or reject a pending booking (car owner only)."""
        payload = BookingDecisionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = services.decide_booking(
            self._ctx(),
            kwargs["pk"],
            payload.validated_data["status"],
        )
        return self._respond(booking)

    @action(
        detail=False,
        methods=["get"],
        url_path="history/mine",
        permission_classes=[permissions.IsAuthenticated, HasRole.with_roles([User.Role.USER])],
    )
    def history_mine(self, request, *args, **kwargs):
        """Return bookings the caller made as a renter."""
        return self._respond_many(services.user_history(self._ctx()))

    @action(
        detail=False,
        methods=["get"],
        url_path="history/owned",
        permission_classes=[permissions.IsAuthenticated, HasRole.with_roles([User.Role.OWNER])],
    )
    def history_owned(self, request, *args, **kwargs):
        """Return bookings made on the caller's cars."""
        return self._respond_many(services.owner_history(self._ctx()))

    @action(detail=False, methods=["get"], url_path="check-availability")
    def check_availability(self, request, *args, **kwargs):
        """Return whether the car is free for the whole requested range."""
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        car = get_car(query.validated_data["car"])
        available = car.is_active and not has_conflict(
            car.pk,
            query.validated_data["start_date"],
            query.validated_data["end_date"],
        )
        return Response(
            {
                "car": str(car.pk),
                "start_date": query.validated_data["start_date"].isoformat(),
                "end_date": query.validated_data["end_date"].isoformat(),
                "available": available,
            },
            status=status.HTTP_200_OK,
        )
