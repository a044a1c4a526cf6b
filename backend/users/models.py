from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Marketplace account; the role decides which booking actions are allowed."""

    class Role(models.TextChoices):
        USER = "User", "User"
        OWNER = "Owner", "Owner"
        ADMIN = "Admin", "Admin"
        SUPPORT = "Support", "Support"

    role = models.CharField(
        max_length=16,
        choices=Role.choices,
        default=Role.USER,
        help_text="User rents cars, Owner lists them; Admin and Support operate the platform.",
    )
    city = models.CharField(
        max_length=120,
        blank=True,
        default="",
        help_text="City for the primary address.",
    )

    @property
    def display_name(self) -> str:
        full_name = (self.get_full_name() or "").strip()
        return full_name or self.username
