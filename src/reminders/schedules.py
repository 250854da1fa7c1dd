"""When the reminder scans fire.

Kept free of model imports: ``config.celery`` reads these at start-up to
build the beat schedule.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from celery.schedules import crontab
from django.utils import timezone


@dataclass(frozen=True)
class ScanSchedule:
    """A cron-like trigger expressed in platform-local time."""

    name: str
    task: str
    minutes: tuple[int, ...]
    hours: tuple[int, ...] | None = None

    def is_due(self, now: datetime) -> bool:
        local = timezone.localtime(now)
        if local.minute not in self.minutes:
            return False
        return self.hours is None or local.hour in self.hours

    def as_crontab(self) -> crontab:
        return crontab(
            minute=",".join(str(m) for m in self.minutes),
            hour="*" if self.hours is None else ",".join(str(h) for h in self.hours),
        )


# Tenants start at different times and in different time zones; the scan
# itself decides which tenants are inside their nudge window.
MORNING_NUDGE = ScanSchedule(
    name="morning_nudge",
    task="reminders.tasks.morning_nudge",
    minutes=(0, 30),
)

GHOST_SESSION = ScanSchedule(
    name="ghost_sessions",
    task="reminders.tasks.ghost_sessions",
    minutes=(0,),
)

ALL = (MORNING_NUDGE, GHOST_SESSION)
