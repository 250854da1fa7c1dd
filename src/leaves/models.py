"""Leave requests sent by employees through the bot."""
from django.db import models

from core.models import TimeStampedModel


class LeaveRequest(TimeStampedModel):
    """A day off asked for in chat and decided by a manager in chat.

    ``reference`` is the short id quoted in WhatsApp messages
    (``OK 3f2a9c1e``); it is the first eight hex digits of the primary key.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", "En attente"
        APPROVED = "APPROVED", "Approuvee"
        REJECTED = "REJECTED", "Refusee"

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="leave_requests",
        verbose_name="employe",
    )
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="leave_requests",
        verbose_name="entreprise",
    )
    reference = models.CharField("reference", max_length=8, db_index=True, editable=False)
    start_date = models.DateField("date de debut")
    end_date = models.DateField("date de fin")
    reason = models.TextField("motif", blank=True, default="")
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    # Review
    reviewed_by = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_leave_requests",
        verbose_name="traitee par",
    )
    reviewed_at = models.DateTimeField("traitee le", null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Demande de conge"
        verbose_name_plural = "Demandes de conge"

    def __str__(self):
        return f"#{self.reference} {self.start_date:%d/%m/%Y} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        if not self.reference:
            self.reference = self.id.hex[:8]
        super().save(*args, **kwargs)
