"""
Review gate: a renter may rate a booking once, after it has run its course.
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction

from bookings.domain import is_reviewable
from bookings.models import Booking
from core.context import AuthContext
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

from .models import Review, update_car_review_stats

logger = logging.getLogger(__name__)


def validate_rating(rating: int) -> None:
    low = settings.REVIEW_MIN_RATING
    high = settings.REVIEW_MAX_RATING
    if rating is None or not low <= rating <= high:
        raise ValidationError(f"Rating must be between {low} and {high}.")


def create_review(
    ctx: AuthContext,
    booking_id: UUID | str,
    *,
    rating: int,
    comment: str = "",
    today: date | None = None,
) -> Review:
    """Record the renter's review of a finished booking and refresh the car's aggregates."""
    validate_rating(rating)

    with transaction.atomic():
        booking = (
            Booking.objects.select_for_update()
            .select_related("car")
            .filter(pk=booking_id)
            .first()
        )
        if booking is None:
            raise NotFoundError("Booking not found.")
        if booking.renter_id != ctx.user_id:
            raise AuthorizationError("You can review only your own bookings.")
        if booking.status not in (Booking.Status.ACCEPTED, Booking.Status.COMPLETED):
            raise InvalidStateError("You can review only accepted bookings.")
        if not is_reviewable(booking, today):
            raise InvalidStateError("Booking not finished yet.")
        if Review.objects.filter(booking=booking).exists():
            raise ConflictError("This booking already has a review.")

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    booking=booking,
                    author_id=ctx.user_id,
                    rating=rating,
                    comment=comment or "",
                )
        except IntegrityError as exc:
            raise ConflictError("This booking already has a review.") from exc

        update_car_review_stats(booking.car)

    logger.info(
        "reviews: booking %s rated %s by user=%s",
        booking.pk,
        rating,
        ctx.user_id,
    )
    return review


def list_reviews(*, booking_id: UUID | str | None = None, car_id: UUID | str | None = None):
    qs = Review.objects.select_related("booking", "booking__car", "author")
    if booking_id:
        qs = qs.filter(booking_id=booking_id)
    if car_id:
        qs = qs.filter(booking__car_id=car_id)
    return qs


def get_review(review_id: int) -> Review:
    review = list_reviews().filter(pk=review_id).first()
    if review is None:
        raise NotFoundError("Review not found.")
    return review
