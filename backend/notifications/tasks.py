from __future__ import annotations

import logging
from typing import Optional

from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from notifications.models import NotificationLog

logger = logging.getLogger(__name__)
User = get_user_model()


def _get_user(user_id: int) -> Optional[User]:
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        logger.warning("notifications: user %s no longer exists", user_id)
        return None


def _get_booking(booking_id: str):
    from bookings.models import Booking

    try:
        return Booking.all_objects.select_related("car", "car__owner", "renter").get(
            pk=booking_id
        )
    except Booking.DoesNotExist:
        logger.warning("notifications: booking %s no longer exists", booking_id)
        return None


def _render(template: str, context: dict) -> str:
    """Render a template relative to the notifications app."""
    return render_to_string(f"email/{template}", context).strip()


def _build_email_context(extra: Optional[dict]) -> dict:
    frontend_origin = (getattr(settings, "FRONTEND_ORIGIN", "") or "").rstrip("/")
    context = {
        "site_name": getattr(settings, "SITE_NAME", "Carshare"),
        "site_url": frontend_origin,
    }
    if extra:
        context.update(extra)
    return context


def _log_notification(
    channel: str,
    type_: str,
    status: str,
    *,
    user_id: int | None = None,
    booking_id: str | None = None,
    error: str | None = None,
) -> None:
    try:
        NotificationLog.objects.create(
            channel=channel,
            type=type_,
            status=status,
            user_id=user_id,
            booking_id=booking_id or "",
            error=error or "",
        )
    except Exception:
        logger.exception(
            "notifications: failed to persist notification log",
            extra={"channel": channel, "type": type_, "status": status},
        )


def _send_email_logged(
    type_: str,
    *,
    to_email: str | None,
    subject: str,
    template: str,
    context: dict | None = None,
    user_id: int | None = None,
    booking_id: str | None = None,
) -> bool:
    if not to_email:
        _log_notification(
            NotificationLog.Channel.EMAIL,
            type_,
            NotificationLog.Status.FAILED,
            user_id=user_id,
            booking_id=booking_id,
            error="missing recipient email",
        )
        logger.warning("notifications: cannot send email without recipient")
        return False

    email_context = _build_email_context(context)
    email_context["subject"] = subject
    message = EmailMultiAlternatives(
        subject=subject,
        body=_render(template, email_context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to_email],
    )

    try:
        message.send(fail_silently=False)
    except Exception as exc:
        logger.exception(
            "notifications: email send failed",
            extra={"type": type_, "booking_id": booking_id, "user_id": user_id},
        )
        _log_notification(
            NotificationLog.Channel.EMAIL,
            type_,
            NotificationLog.Status.FAILED,
            user_id=user_id,
            booking_id=booking_id,
            error=str(exc) or exc.__class__.__name__,
        )
        return False

    _log_notification(
        NotificationLog.Channel.EMAIL,
        type_,
        NotificationLog.Status.SENT,
        user_id=user_id,
        booking_id=booking_id,
    )
    return True


def _display_name(user: Optional[User]) -> str:
    if not user:
        return "Unknown"
    full_name = (user.get_full_name() or "").strip()
    return full_name or user.username


def _car_title(booking) -> str:
    return f"{booking.car.brand} {booking.car.model}"


@shared_task(queue="emails")
def send_booking_request_email(owner_id: int, booking_id: str):
    """Notify the car owner that a renter submitted a new booking request."""
    owner = _get_user(owner_id)
    if not owner:
        return

    booking = _get_booking(booking_id)
    if booking is None:
        return

    frontend_origin = (getattr(settings, "FRONTEND_ORIGIN", "") or "").rstrip("/")
    car_title = _car_title(booking)
    context = {
        "owner_full_name": _display_name(owner),
        "renter_full_name": _display_name(booking.renter),
        "car_title": car_title,
        "start_date": booking.start_date,
        "end_date": booking.end_date,
        "days": booking.days,
        "total_price": booking.total_price,
        "cta_url": f"{frontend_origin}/bookings/owned" if frontend_origin else "",
    }
    _send_email_logged(
        "booking_request",
        to_email=owner.email,
        subject=f"New booking request for your {car_title}",
        template="booking_request_new.txt",
        context=context,
        user_id=owner_id,
        booking_id=booking_id,
    )


@shared_task(queue="emails")
def send_booking_status_email(renter_id: int, booking_id: str, new_status: str):
    """Notify the renter that the owner accepted or rejected their booking."""
    from bookings.models import Booking

    renter = _get_user(renter_id)
    if not renter:
        return

    booking = _get_booking(booking_id)
    if booking is None:
        return

    status_word_map = {
        Booking.Status.ACCEPTED.value: "accepted",
        Booking.Status.REJECTED.value: "rejected",
        Booking.Status.COMPLETED.value: "completed",
        Booking.Status.CANCELLED.value: "cancelled",
    }
    status_word = status_word_map.get(new_status, "updated")
    frontend_origin = (getattr(settings, "FRONTEND_ORIGIN", "") or "").rstrip("/")
    car_title = _car_title(booking)
    context = {
        "renter_full_name": _display_name(renter),
        "car_title": car_title,
        "status_word": status_word,
        "start_date": booking.start_date,
        "end_date": booking.end_date,
        "total_price": booking.total_price,
        "cta_url": f"{frontend_origin}/bookings/mine" if frontend_origin else "",
    }
    _send_email_logged(
        "booking_status_update",
        to_email=getattr(renter, "email", None),
        subject=f"Your booking for the {car_title} was {status_word}",
        template="booking_status_update.txt",
        context=context,
        user_id=renter_id,
        booking_id=booking_id,
    )
