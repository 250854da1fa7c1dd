"""Pure rules of an attendance session, plus the ghost-reminder claim.

A *ghost* session is an open session that has outlived the tenant's
``max_work_hours``: the employee most likely forgot to check out.  Ghost
reminders are rate-limited by a rolling cooldown measured from
``last_reminder_sent_at``.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from django.conf import settings
from django.db.models import Q

from attendance.models import Attendance


def default_cooldown() -> timedelta:
    return timedelta(hours=settings.GHOST_REMINDER_COOLDOWN_HOURS)


def is_open(session: Attendance) -> bool:
    return session.check_out is None


def duration(session: Attendance, as_of: datetime) -> timedelta:
    """Worked time; open sessions are measured up to *as_of*."""
    end = session.check_out if session.check_out is not None else as_of
    return end - session.check_in


def is_ghost(session: Attendance, max_work_hours: int, as_of: datetime) -> bool:
    """True once an open session is strictly longer than *max_work_hours*."""
    if not is_open(session):
        return False
    return duration(session, as_of) > timedelta(hours=max_work_hours)


def should_remind(session: Attendance, as_of: datetime, cooldown: timedelta | None = None) -> bool:
    if cooldown is None:
        cooldown = default_cooldown()
    if session.last_reminder_sent_at is None:
        return True
    return as_of - session.last_reminder_sent_at >= cooldown


def claim_ghost_reminder(session: Attendance, as_of: datetime, cooldown: timedelta | None = None) -> bool:
    """Atomically mark *session* as reminded at *as_of*.

    The conditional UPDATE only matches while the session is still open and
    its cooldown has elapsed, so of several concurrent scans exactly one
    wins.  The caller sends the reminder only when this returns ``True``;
    the marker stays set even if that send then fails.
    """
    if cooldown is None:
        cooldown = default_cooldown()
    claimed = (
        Attendance.objects
        .filter(pk=session.pk, check_out__isnull=True)
        .filter(
            Q(last_reminder_sent_at__isnull=True)
            | Q(last_reminder_sent_at__lte=as_of - cooldown)
        )
        .update(last_reminder_sent_at=as_of)
    )
    if claimed:
        session.last_reminder_sent_at = as_of
    return claimed == 1


def format_duration(delta: timedelta) -> str:
    """Render *delta* as ``XhYY`` (e.g. ``8h05``)."""
    total_minutes = max(int(delta.total_seconds() // 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h{minutes:02d}"
