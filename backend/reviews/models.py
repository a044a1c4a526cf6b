from __future__ import annotations

from django.conf import settings
from django.db import models


class Review(models.Model):
    """A renter's rating of a finished booking; at most one per booking."""

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="review",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="authored_reviews",
    )
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Review by {self.author_id} for booking {self.booking_id}"


def update_car_review_stats(car) -> None:
    """Recalculate rating and review_count aggregates for the given car."""
    from django.db.models import Avg, Count

    qs = Review.objects.filter(booking__car=car)
    agg = qs.aggregate(avg=Avg("rating"), count=Count("id"))
    car.rating = round(agg.get("avg") or 0.0, 2)
    car.review_count = agg.get("count") or 0
    car.save(update_fields=["rating", "review_count"])
