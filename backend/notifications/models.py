from django.conf import settings
from django.db import models


class NotificationLog(models.Model):
    """One row per attempted notification, sent or failed."""

    class Channel(models.TextChoices):
        EMAIL = "email", "Email"

    class Status(models.TextChoices):
        SENT = "sent", "Sent"
        FAILED = "failed", "Failed"

    channel = models.CharField(max_length=8, choices=Channel.choices)
    type = models.CharField(max_length=128)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notification_logs",
    )
    booking_id = models.CharField(max_length=36, blank=True, default="")
    status = models.CharField(max_length=8, choices=Status.choices)
    error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["created_at"], name="notif_created_idx"),
            models.Index(fields=["booking_id", "created_at"], name="notif_booking_created_idx"),
            models.Index(fields=["type", "created_at"], name="notif_type_created_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.channel}:{self.type} ({self.status})"
