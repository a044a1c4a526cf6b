"""Celery tasks for bookings."""

from __future__ import annotations

import logging
from datetime import date

from celery import shared_task
from django.utils import timezone

from .models import Booking

logger = logging.getLogger(__name__)


@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> int:
    """
    Mark accepted bookings whose last day is behind us as completed.

    Returns the number of bookings completed.
    """
    today: date = timezone.localdate()
    finished = Booking.objects.filter(
        status=Booking.Status.ACCEPTED,
        end_date__lt=today,
    )
    completed_count = finished.update(status=Booking.Status.COMPLETED, updated_at=timezone.now())
    if completed_count:
        logger.info("bookings: completed %s finished bookings", completed_count)
    return completed_count
