"""Database models for car bookings."""

from __future__ import annotations

import uuid
from datetime import date

from django.conf import settings
from django.db import models
from django.utils import timezone

from cars.models import Car


class BookingQuerySet(models.QuerySet):
    def for_car(self, car_id):
        return self.filter(car_id=car_id)

    def for_renter(self, user_id: int):
        return self.filter(renter_id=user_id)

    def for_owner(self, user_id: int):
        return self.filter(car__owner_id=user_id)

    def visible_to(self, user_id: int):
        return self.filter(models.Q(renter_id=user_id) | models.Q(car__owner_id=user_id))


class BookingManager(models.Manager.from_queryset(BookingQuerySet)):
    """Default manager; soft-deleted bookings never show up here."""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class Booking(models.Model):
    """A renter's reservation of a car for an inclusive range of days."""

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        ACCEPTED = "Accepted", "Accepted"
        REJECTED = "Rejected", "Rejected"
        COMPLETED = "Completed", "Completed"
        CANCELLED = "Cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    car = models.ForeignKey(
        Car,
        related_name="bookings",
        on_delete=models.CASCADE,
    )
    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name="bookings_as_renter",
        on_delete=models.CASCADE,
    )
    start_date = models.DateField()
    end_date = models.DateField(help_text="Last rented day, inclusive.")
    total_price = models.PositiveIntegerField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = BookingManager()
    all_objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ["-start_date", "-created_at"]
        indexes = [
            models.Index(fields=["car", "start_date", "end_date"], name="bookings_car_range_idx"),
            models.Index(fields=["renter", "status"], name="bookings_renter_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="bookings_end_not_before_start",
            ),
        ]

    def __str__(self) -> str:
        """Return a human-readable representation."""
        return f"Booking {self.pk} for car {self.car_id} ({self.status})"

    @property
    def days(self) -> int:
        """Return the count of booked days, both ends included."""
        if not self.start_date or not self.end_date:
            return 0
        return (self.end_date - self.start_date).days + 1

    def has_ended(self, today: date | None = None) -> bool:
        """Return True when the last booked day is today or earlier."""
        if not self.end_date:
            return False
        if today is None:
            today = timezone.localdate()
        return self.end_date <= today
