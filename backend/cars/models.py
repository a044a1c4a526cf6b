import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Car(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cars",
    )
    brand = models.CharField(max_length=60)
    model = models.CharField(max_length=60)
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    price_per_day = models.PositiveIntegerField(
        validators=[MinValueValidator(0)],
        help_text="Flat daily rate in whole currency units.",
    )
    city = models.CharField(max_length=60, blank=True, default="")
    is_active = models.BooleanField(default=True)
    rating = models.FloatField(default=0.0)
    review_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["brand", "model"]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="cars_owner_active_idx"),
        ]

    def clean(self):
        if not self.brand or not self.brand.strip():
            raise ValidationError("Brand is required")
        if self.price_per_day and self.price_per_day > 100000:
            raise ValidationError("Unreasonable price")

    def __str__(self) -> str:
        return f"{self.brand} {self.model} ({self.id})"
