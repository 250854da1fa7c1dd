"""Models for the integrations app."""
from django.db import models

from core.models import TimeStampedModel
from integrations import vault


class Integration(TimeStampedModel):
    """One encrypted provider secret (e.g. ``WHATSAPP.TOKEN``)."""

    class Provider(models.TextChoices):
        WHATSAPP = "WHATSAPP", "WhatsApp Cloud API"

    provider = models.CharField("fournisseur", max_length=30, choices=Provider.choices)
    key = models.CharField("cle", max_length=60)
    value = models.TextField("valeur chiffree")
    is_enabled = models.BooleanField("active", default=True)

    class Meta:
        ordering = ["provider", "key"]
        verbose_name = "Integration"
        verbose_name_plural = "Integrations"
        unique_together = [("provider", "key")]

    def __str__(self):
        return f"{self.provider}.{self.key}"

    def set_secret(self, plaintext: str):
        self.value = vault.encrypt(plaintext)

    def get_secret(self) -> str:
        return vault.decrypt(self.value)
