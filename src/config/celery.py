"""Celery configuration."""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.prod"),
)

app = Celery("pointage")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule
from reminders.schedules import GHOST_SESSION, MORNING_NUDGE  # noqa: E402

app.conf.beat_schedule = {
    "reminders-morning-nudge": {
        "task": "reminders.tasks.morning_nudge",
        "schedule": MORNING_NUDGE.as_crontab(),  # Every 30 minutes
    },
    "reminders-ghost-sessions": {
        "task": "reminders.tasks.ghost_sessions",
        "schedule": GHOST_SESSION.as_crontab(),  # Every hour
    },
    "bot-purge-processed-messages": {
        "task": "bot.tasks.purge_processed_messages",
        "schedule": crontab(hour=3, minute=15),  # Daily at 03:15
    },
}
