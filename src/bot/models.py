"""Models for the bot app."""
from django.db import models

from core.models import TimeStampedModel


class ProcessedMessage(TimeStampedModel):
    """WhatsApp message id already handled; redeliveries are ignored."""

    message_id = models.CharField("identifiant WhatsApp", max_length=255, unique=True)
    phone_number = models.CharField("expediteur", max_length=20, blank=True, default="")
    message_type = models.CharField("type", max_length=30, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Message traite"
        verbose_name_plural = "Messages traites"

    def __str__(self):
        return self.message_id
