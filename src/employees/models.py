"""Models for the employees app."""
from django.core.exceptions import ValidationError
from django.db import models

from core.models import TimeStampedModel
from employees.phones import normalize_phone


class ConversationState(models.TextChoices):
    AWAITING_PHOTO = "awaiting_photo", "En attente de la photo du justificatif"
    AWAITING_AMOUNT = "awaiting_amount", "En attente du montant"
    AWAITING_CATEGORY = "awaiting_category", "En attente de la categorie"


class EmployeeQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def managers(self):
        return self.filter(role=Employee.Role.MANAGER)

    def workers(self):
        return self.filter(role=Employee.Role.EMPLOYEE)


class Employee(TimeStampedModel):
    """Employe d'une entreprise cliente, identifie par son numero WhatsApp."""

    class Role(models.TextChoices):
        MANAGER = "MANAGER", "Manager"
        EMPLOYEE = "EMPLOYEE", "Employe"

    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="employees",
        verbose_name="entreprise",
    )
    site = models.ForeignKey(
        "tenants.Site",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
        verbose_name="site de rattachement",
    )
    phone_number = models.CharField(
        "telephone",
        max_length=20,
        unique=True,
        help_text="Chiffres uniquement, indicatif pays inclus, sans '+' (ex: 33612345678).",
    )
    name = models.CharField("nom", max_length=255, blank=True, default="")
    role = models.CharField(
        "role",
        max_length=20,
        choices=Role.choices,
        default=Role.EMPLOYEE,
        db_index=True,
    )
    is_active = models.BooleanField("actif", default=True)

    # Conversation
    conversation_state = models.CharField(
        "etat de conversation",
        max_length=30,
        choices=ConversationState.choices,
        null=True,
        blank=True,
    )
    temp_expense_data = models.JSONField(
        "donnees temporaires",
        null=True,
        blank=True,
        help_text="Donnees accumulees pendant une conversation en cours.",
    )
    last_nudge_sent_at = models.DateTimeField("derniere relance du matin", null=True, blank=True)

    objects = EmployeeQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name = "Employe"
        verbose_name_plural = "Employes"
        indexes = [
            models.Index(fields=["tenant", "role"], name="employee_tenant_role_idx"),
        ]

    def __str__(self):
        return self.name or self.phone_number

    def _region(self):
        return self.tenant.country if self.tenant_id else None

    def clean(self):
        if normalize_phone(self.phone_number, self._region()) is None:
            raise ValidationError({"phone_number": "Numero de telephone invalide."})
        if self.site_id and self.site.tenant_id != self.tenant_id:
            raise ValidationError({"site": "Le site n'appartient pas a cette entreprise."})

    def save(self, *args, **kwargs):
        self.phone_number = normalize_phone(self.phone_number, self._region()) or self.phone_number
        super().save(*args, **kwargs)

    @property
    def is_manager(self) -> bool:
        return self.role == self.Role.MANAGER

    @property
    def first_name(self) -> str:
        parts = (self.name or "").split()
        return parts[0] if parts else "Collègue"
