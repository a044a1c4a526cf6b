"""
Booking lifecycle engine.

Every mutation of a Booking goes through this module. Each operation takes an
explicit AuthContext, validates everything before writing, and runs inside a
single transaction so the availability check and the write cannot interleave
with a concurrent booking of the same car.
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from django.db import transaction

from cars.directory import get_car, is_owned_by
from core.context import AuthContext
from core.exceptions import AuthorizationError, NotFoundError
from notifications import tasks as notification_tasks
from users.models import User

from .domain import (
    assert_can_cancel,
    assert_can_create,
    assert_can_decide,
    assert_can_modify,
    compute_total_price,
    ensure_car_bookable,
    ensure_no_conflict,
    mark_cancelled,
    parse_decision,
    validate_booking_dates,
)
from .models import Booking

logger = logging.getLogger(__name__)

OPERATOR_ROLES = (User.Role.ADMIN, User.Role.SUPPORT)


def _base_queryset():
    return Booking.objects.select_related("car", "car__owner", "renter")


def _load_booking(booking_id: UUID | str, *, for_update: bool = False) -> Booking:
    qs = Booking.objects.all()
    if for_update:
        qs = qs.select_for_update()
    booking = qs.filter(pk=booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found.")
    return booking


def _reload(booking: Booking) -> Booking:
    """Fetch the booking again with car and renter joined for presentation."""
    return Booking.all_objects.select_related("car", "car__owner", "renter").get(pk=booking.pk)


def _queue_owner_request_email(booking: Booking) -> None:
    owner_id = booking.car.owner_id
    booking_id = str(booking.pk)

    def _send():
        try:
            notification_tasks.send_booking_request_email.delay(owner_id, booking_id)
        except Exception:
            logger.info(
                "notifications: could not queue send_booking_request_email for booking %s",
                booking_id,
                exc_info=True,
            )

    transaction.on_commit(_send)


def _queue_renter_status_email(booking: Booking) -> None:
    renter_id = booking.renter_id
    booking_id = str(booking.pk)
    new_status = str(booking.status)

    def _send():
        try:
            notification_tasks.send_booking_status_email.delay(renter_id, booking_id, new_status)
        except Exception:
            logger.info(
                "notifications: could not queue send_booking_status_email for booking %s",
                booking_id,
                exc_info=True,
            )

    transaction.on_commit(_send)


def create_booking(
    ctx: AuthContext,
    *,
    car_id: UUID | str,
    start_date: date,
    end_date: date,
) -> Booking:
    """Create a pending booking for the calling renter."""
    assert_can_create(ctx)
    validate_booking_dates(start_date, end_date)

    with transaction.atomic():
        car = get_car(car_id, for_update=True)
        ensure_car_bookable(car)
        ensure_no_conflict(car.pk, start_date, end_date)

        booking = Booking.objects.create(
            car=car,
            renter_id=ctx.user_id,
            start_date=start_date,
            end_date=end_date,
            total_price=compute_total_price(start_date, end_date, car.price_per_day),
            status=Booking.Status.PENDING,
        )
        _queue_owner_request_email(booking)

    logger.info(
        "bookings: created %s car=%s renter=%s %s..%s total=%s",
        booking.pk,
        car.pk,
        ctx.user_id,
        start_date,
        end_date,
        booking.total_price,
    )
    return _reload(booking)


def update_booking(
    ctx: AuthContext,
    booking_id: UUID | str,
    *,
    car_id: UUID | str,
    start_date: date,
    end_date: date,
) -> Booking:
    """Change car and dates of a pending booking; price is recomputed."""
    with transaction.atomic():
        booking = _load_booking(booking_id, for_update=True)
        assert_can_modify(booking, ctx)
        validate_booking_dates(start_date, end_date)

        car = get_car(car_id, for_update=True)
        ensure_car_bookable(car)
        ensure_no_conflict(car.pk, start_date, end_date, exclude_booking_id=booking.pk)

        booking.car = car
        booking.start_date = start_date
        booking.end_date = end_date
        booking.total_price = compute_total_price(start_date, end_date, car.price_per_day)
        booking.save(update_fields=["car", "start_date", "end_date", "total_price", "updated_at"])

    logger.info(
        "bookings: updated %s car=%s %s..%s total=%s",
        booking.pk,
        car.pk,
        start_date,
        end_date,
        booking.total_price,
    )
    return _reload(booking)


def cancel_booking(ctx: AuthContext, booking_id: UUID | str) -> Booking:
    """Soft-delete a pending booking; a second call finds nothing."""
    with transaction.atomic():
        booking = _load_booking(booking_id, for_update=True)
        assert_can_cancel(booking, ctx)
        mark_cancelled(booking)
        booking.save(update_fields=["status", "deleted_at", "updated_at"])

    logger.info("bookings: cancelled %s by user=%s", booking.pk, ctx.user_id)
    return _reload(booking)


def decide_booking(ctx: AuthContext, booking_id: UUID | str, requested_status: object) -> Booking:
    """Accept or reject a pending booking on behalf of the car owner."""
    with transaction.atomic():
        booking = _load_booking(booking_id, for_update=True)
        if not is_owned_by(booking.car_id, ctx.user_id):
            raise AuthorizationError("Only the car owner can accept or reject this booking.")
        assert_can_decide(booking)
        new_status = parse_decision(requested_status)

        booking.status = new_status
        booking.save(update_fields=["status", "updated_at"])
        _queue_renter_status_email(booking)

    logger.info("bookings: %s marked %s by owner=%s", booking.pk, new_status, ctx.user_id)
    return _reload(booking)


def list_bookings(ctx: AuthContext):
    """Bookings the caller takes part in; operators see every booking."""
    qs = _base_queryset()
    if ctx.has_role(*OPERATOR_ROLES):
        return qs
    return qs.visible_to(ctx.user_id)


def get_booking(ctx: AuthContext, booking_id: UUID | str) -> Booking:
    booking = list_bookings(ctx).filter(pk=booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found.")
    return booking


def user_history(ctx: AuthContext):
    return _base_queryset().for_renter(ctx.user_id).order_by("-start_date", "-created_at")


def owner_history(ctx: AuthContext):
    return _base_queryset().for_owner(ctx.user_id).order_by("-start_date", "-created_at")
