"""Models for the notifications app."""
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class Notification(TimeStampedModel):
    """An alert addressed to one manager, persisted then pushed on WhatsApp."""

    class Type(models.TextChoices):
        LATE = "LATE", "Retard"
        ABSENCE = "ABSENCE", "Absence"
        GEOFENCE = "GEOFENCE", "Hors zone"
        EXPENSE = "EXPENSE", "Note de frais"

    manager = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="destinataire",
    )
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="entreprise",
    )
    type = models.CharField("type", max_length=20, choices=Type.choices)
    title = models.CharField("titre", max_length=200)
    message = models.TextField("message")
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="subject_notifications",
        verbose_name="employe concerne",
    )

    # Read tracking
    is_read = models.BooleanField("lu", default=False)
    read_at = models.DateTimeField("lu le", null=True, blank=True)

    # Settable so that scans running with an explicit clock stamp their rows.
    created_at = models.DateTimeField("cree le", default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        indexes = [
            models.Index(
                fields=["manager", "type", "employee", "created_at"],
                name="notification_antispam_idx",
            ),
            models.Index(fields=["manager", "is_read"], name="notification_unread_idx"),
        ]

    def __str__(self):
        return f"[{self.get_type_display()}] {self.title}"
