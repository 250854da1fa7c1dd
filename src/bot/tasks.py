"""Celery tasks for the bot app."""
import logging
from datetime import timedelta

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger("pointage")

RETENTION_DAYS = 7


@shared_task(name="bot.tasks.purge_processed_messages")
def purge_processed_messages():
    """Delete dedup records older than the WhatsApp redelivery horizon."""
    from bot.models import ProcessedMessage

    cutoff = timezone.now() - timedelta(days=RETENTION_DAYS)
    deleted, _ = ProcessedMessage.objects.filter(created_at__lt=cutoff).delete()
    logger.info("purge_processed_messages completed: %d records deleted.", deleted)
    return f"{deleted} records deleted"
