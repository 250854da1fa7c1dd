"""Models for the tenants app."""
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel
from tenants import vocabulary
from tenants.industries import FEATURE_KEYS, GENERIC, INDUSTRY_TEMPLATES


# ---------------------------------------------------------------------------
# Tenant
# ---------------------------------------------------------------------------

class Tenant(TimeStampedModel):
    """Customer organisation; the unit of data isolation."""

    class Industry(models.TextChoices):
        BTP = "BTP", "BTP"
        RETAIL = "RETAIL", "Commerce"
        CLEANING = "CLEANING", "Proprete"
        SECURITY = "SECURITY", "Securite"
        OFFICE = "OFFICE", "Bureau"
        GENERIC = GENERIC, "Generique"

    class Plan(models.TextChoices):
        TRIAL = "TRIAL", "Essai"
        STARTER = "STARTER", "Starter"
        PRO = "PRO", "Pro"
        ENTERPRISE = "ENTERPRISE", "Entreprise"

    name = models.CharField("nom", max_length=255)
    industry = models.CharField(
        "secteur",
        max_length=20,
        choices=Industry.choices,
        default=Industry.GENERIC,
    )
    country = models.CharField("pays", max_length=2, default="FR")
    plan = models.CharField("offre", max_length=20, choices=Plan.choices, default=Plan.TRIAL)
    config = models.JSONField(
        "fonctionnalites",
        default=dict,
        blank=True,
        help_text="Surcharges des fonctionnalites du modele sectoriel (enable_gps, ...).",
    )
    vocabulary = models.JSONField(
        "vocabulaire",
        default=dict,
        blank=True,
        help_text="Surcharges du vocabulaire du modele sectoriel (workplace, action_in, ...).",
    )
    work_start_time = models.TimeField("heure de debut", default=time(9, 0))
    max_work_hours = models.PositiveIntegerField(
        "duree max de session (h)",
        default=12,
        validators=[MinValueValidator(1)],
    )
    timezone = models.CharField("fuseau horaire", max_length=64, default=settings.TIME_ZONE)
    default_latitude = models.FloatField("latitude par defaut", null=True, blank=True)
    default_longitude = models.FloatField("longitude par defaut", null=True, blank=True)
    is_active = models.BooleanField("actif", default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Entreprise cliente"
        verbose_name_plural = "Entreprises clientes"

    def __str__(self):
        return f"{self.name} ({self.industry})"

    def clean(self):
        if self.industry not in INDUSTRY_TEMPLATES:
            raise ValidationError({"industry": "Secteur inconnu."})
        if not isinstance(self.config, dict):
            raise ValidationError({"config": "La configuration doit etre un objet JSON."})
        unknown = set(self.config) - set(FEATURE_KEYS)
        if unknown:
            raise ValidationError({"config": f"Cles inconnues : {', '.join(sorted(unknown))}."})
        if not isinstance(self.vocabulary, dict):
            raise ValidationError({"vocabulary": "Le vocabulaire doit etre un objet JSON."})
        try:
            ZoneInfo(self.timezone)
        except (KeyError, ValueError):
            raise ValidationError({"timezone": "Fuseau horaire invalide."})

    # -- vocabulary / features -------------------------------------------------

    @property
    def effective_vocabulary(self):
        return vocabulary.merged_vocabulary(self)

    @property
    def effective_config(self):
        return vocabulary.merged_config(self)

    def text(self, key: str) -> str:
        return vocabulary.resolve_text(self, key)

    def is_feature_enabled(self, key: str) -> bool:
        return vocabulary.resolve_feature(self, key)

    # -- local time ------------------------------------------------------------

    @property
    def tzinfo(self):
        return ZoneInfo(self.timezone or settings.TIME_ZONE)

    def localtime(self, value: datetime) -> datetime:
        return timezone.localtime(value, self.tzinfo)

    def day_bounds(self, value: datetime):
        """Return ``(start, end)`` of the tenant-local calendar day of *value*.

        ``end`` is exclusive (next local midnight).
        """
        local_day = self.localtime(value).date()
        start = datetime.combine(local_day, time.min, tzinfo=self.tzinfo)
        end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=self.tzinfo)
        return start, end


# ---------------------------------------------------------------------------
# Site
# ---------------------------------------------------------------------------

class Site(TimeStampedModel):
    """Work location with optional GPS coordinates for geofencing."""

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="sites",
        verbose_name="entreprise",
    )
    name = models.CharField("nom", max_length=255)
    address = models.TextField("adresse", blank=True, default="")
    latitude = models.FloatField("latitude", null=True, blank=True)
    longitude = models.FloatField("longitude", null=True, blank=True)
    radius = models.PositiveIntegerField("rayon autorise (m)", null=True, blank=True)
    is_active = models.BooleanField("actif", default=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Site"
        verbose_name_plural = "Sites"
        unique_together = [("tenant", "name")]

    def __str__(self):
        return f"{self.name} ({self.tenant.name})"

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
