"""Models for expense reports submitted through the bot."""
from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


class Expense(TimeStampedModel):
    """An expense report built turn by turn (photo, amount, category)."""

    class Category(models.TextChoices):
        REPAS = "REPAS", "\U0001f354 Repas"
        ESSENCE = "ESSENCE", "⛽ Essence"
        HOTEL = "HOTEL", "\U0001f3e8 Hotel"
        MATERIEL = "MATERIEL", "\U0001f6e0️ Materiel"

    class Status(models.TextChoices):
        PENDING = "PENDING", "En attente"
        APPROVED = "APPROVED", "Approuvee"
        REJECTED = "REJECTED", "Refusee"

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="expenses",
        verbose_name="employe",
    )
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="expenses",
        verbose_name="entreprise",
    )
    amount = models.DecimalField(
        "montant",
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    category = models.CharField("categorie", max_length=20, choices=Category.choices)
    photo_url = models.CharField("justificatif", max_length=500)
    status = models.CharField(
        "statut",
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    date = models.DateTimeField("date", default=timezone.now)

    # Review
    reviewed_by = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_expenses",
        verbose_name="traitee par",
    )
    reviewed_at = models.DateTimeField("traitee le", null=True, blank=True)

    class Meta:
        ordering = ["-date"]
        verbose_name = "Note de frais"
        verbose_name_plural = "Notes de frais"

    def __str__(self):
        return f"{self.get_category_display()} {self.amount} ({self.get_status_display()})"
