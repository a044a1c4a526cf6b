"""Domain helpers for booking validation, availability and state transitions."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from django.utils import timezone

from cars.models import Car
from core.context import AuthContext
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    UnavailableError,
    ValidationError,
)
from users.models import User

from .models import Booking

logger = logging.getLogger(__name__)

# Statuses that never block dates. Soft-deleted rows are already hidden by
# the default manager; Cancelled is listed for rows read through all_objects.
NON_BLOCKING_STATUSES = (
    Booking.Status.REJECTED,
    Booking.Status.CANCELLED,
)

DECISION_STATUSES = (
    Booking.Status.ACCEPTED,
    Booking.Status.REJECTED,
)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Return True when two inclusive day ranges share at least one day."""
    return a_start <= b_end and a_end >= b_start


def validate_booking_dates(start_date: date | None, end_date: date | None) -> None:
    """Validate that the provided dates exist and form a valid inclusive range."""
    if not start_date or not end_date:
        raise ValidationError("Start and end dates are required.")
    if end_date < start_date:
        raise ValidationError("End date cannot be before start date.")


def compute_total_price(start_date: date, end_date: date, price_per_day: int) -> int:
    """Return day count (both ends included) times the flat daily rate."""
    validate_booking_dates(start_date, end_date)
    days = (end_date - start_date).days + 1
    return days * int(price_per_day)


def has_conflict(
    car_id: UUID | str,
    start_date: date,
    end_date: date,
    *,
    exclude_booking_id: Optional[UUID | str] = None,
) -> bool:
    """Return True if a blocking booking of the car overlaps [start_date, end_date]."""
    qs = Booking.objects.for_car(car_id).exclude(status__in=NON_BLOCKING_STATUSES)
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    return qs.filter(start_date__lte=end_date, end_date__gte=start_date).exists()


def ensure_no_conflict(
    car_id: UUID | str,
    start_date: date,
    end_date: date,
    *,
    exclude_booking_id: Optional[UUID | str] = None,
) -> None:
    if has_conflict(car_id, start_date, end_date, exclude_booking_id=exclude_booking_id):
        raise ConflictError("This car is already booked in the selected period.")


def ensure_car_bookable(car: Car) -> None:
    if not car.is_active:
        raise UnavailableError("Car is not available.")


def assert_can_create(ctx: AuthContext) -> None:
    """Only renters book cars; owners and operators cannot."""
    if ctx.role != User.Role.USER:
        raise AuthorizationError("Only users can make bookings.")


def assert_can_modify(booking: Booking, ctx: AuthContext) -> None:
    """Date and car changes are reserved to the renter while the request is pending."""
    if booking.renter_id != ctx.user_id or booking.status != Booking.Status.PENDING:
        raise AuthorizationError("You are not allowed to modify this booking.")


def assert_can_decide(booking: Booking) -> None:
    if booking.status != Booking.Status.PENDING:
        raise InvalidStateError("Only pending bookings can be accepted or rejected.")


def parse_decision(value: object) -> str:
    """Map a requested status onto Accepted/Rejected or raise ValidationError."""
    if value not in DECISION_STATUSES:
        raise ValidationError("Status must be either Accepted or Rejected.")
    return Booking.Status(value)


def assert_can_cancel(booking: Booking, ctx: AuthContext) -> None:
    """
    Ensure the caller may cancel the booking.
    - Only the renter or an Admin may cancel.
    - Only pending bookings can be cancelled.
    """
    if booking.renter_id != ctx.user_id and ctx.role != User.Role.ADMIN:
        raise AuthorizationError("Only the renter can cancel this booking.")
    if booking.status != Booking.Status.PENDING:
        raise InvalidStateError("Only pending bookings can be cancelled.")


def mark_cancelled(booking: Booking, *, now: datetime | None = None) -> None:
    """Mutate the booking into its cancelled, soft-deleted form."""
    booking.status = Booking.Status.CANCELLED
    booking.deleted_at = now or timezone.now()


def is_reviewable(booking: Booking, today: date | None = None) -> bool:
    """True for accepted or completed bookings whose last day has passed."""
    if booking.status not in {Booking.Status.ACCEPTED, Booking.Status.COMPLETED}:
        return False
    return booking.has_ended(today)
