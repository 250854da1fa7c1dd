"""Reminder scans: morning nudge and ghost sessions.

Both scans take the current instant explicitly and an optional outbound
sender, so they can run from Celery beat, the ``run_reminders`` command,
the staff API or a test with a frozen clock.

Each tenant, employee and session is processed on its own: a failure is
logged with its traceback, counted, and the scan moves on.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from attendance.lifecycle import claim_ghost_reminder, default_cooldown, duration, is_ghost
from attendance.models import Attendance
from employees.models import Employee
from notifications.models import Notification
from notifications.services import notify_all
from tenants.models import Tenant

logger = logging.getLogger("pointage")

SATURDAY = 5


@dataclass
class ScanResult:
    """Counters returned by a scan."""

    name: str
    scanned: int = 0
    sent: int = 0
    notifications: int = 0
    skipped: int = 0
    failures: int = 0
    errors: list[str] = field(default_factory=list)

    def record_failure(self, label: str):
        self.failures += 1
        self.errors.append(label)

    def summary(self) -> str:
        return (
            f"{self.name}: {self.scanned} scanned, {self.sent} sent, "
            f"{self.notifications} notifications, {self.failures} failures"
        )


def _resolve_sender(sender):
    if sender is not None:
        return sender
    from messaging.client import get_sender
    return get_sender()


def is_weekend(value: datetime) -> bool:
    return value.weekday() >= SATURDAY


def in_nudge_window(work_start, local_now: datetime) -> bool:
    """True inside ``[work_start + delay, work_start + delay + window)``."""
    start = work_start.hour * 60 + work_start.minute + settings.MORNING_NUDGE_DELAY_MINUTES
    current = local_now.hour * 60 + local_now.minute
    return start <= current < start + settings.MORNING_NUDGE_WINDOW_MINUTES


# ==================================================================
# Morning nudge
# ==================================================================

def claim_morning_nudge(employee: Employee, now: datetime, day_start: datetime) -> bool:
    """Mark *employee* as nudged today; ``False`` if already done."""
    return Employee.objects.filter(pk=employee.pk).filter(
        Q(last_nudge_sent_at__isnull=True) | Q(last_nudge_sent_at__lt=day_start)
    ).update(last_nudge_sent_at=now) == 1


def _late_employees(tenant: Tenant, now: datetime):
    checked_in = (
        Attendance.objects
        .filter(employee__tenant=tenant)
        .for_day(tenant, now)
        .values("employee_id")
    )
    return (
        Employee.objects
        .active()
        .workers()
        .filter(tenant=tenant)
        .exclude(pk__in=checked_in)
    )


def _nudge_employee(employee: Employee, tenant: Tenant, now, day_start, sender, result: ScanResult):
    if claim_morning_nudge(employee, now, day_start):
        workplace = tenant.text("workplace").lower()
        attendance_word = tenant.text("attendance").lower()
        try:
            delivered = sender.send_buttons(
                employee.phone_number,
                f"\U0001f44b Salut {employee.first_name}, tu es au {workplace} ?\n"
                f"Tu as oublie ton {attendance_word} ce matin.",
                [{"id": "cmd_hi", "title": "✅ Pointer Arrivee"}],
            )
        except Exception:
            logger.exception("Morning nudge could not be sent to employee %s", employee.pk)
            result.record_failure(f"employee:{employee.pk}")
        else:
            if delivered:
                result.sent += 1
    else:
        result.skipped += 1

    created = notify_all(
        tenant,
        type=Notification.Type.LATE,
        title="Retard de pointage",
        message=f"⚠️ {employee.name or 'Un employe'} n'a toujours pas pointe ce matin.",
        employee=employee,
        now=now,
        sender=sender,
    )
    result.notifications += len(created)


def _nudge_tenant(tenant: Tenant, now: datetime, sender, result: ScanResult):
    if not tenant.is_feature_enabled("enable_reminders"):
        return
    local_now = tenant.localtime(now)
    if is_weekend(local_now) or not in_nudge_window(tenant.work_start_time, local_now):
        return

    logger.info("Morning nudge: checking tenant %s (start %s)", tenant.pk, tenant.work_start_time)
    result.scanned += 1
    day_start, _ = tenant.day_bounds(now)
    for employee in _late_employees(tenant, now):
        try:
            _nudge_employee(employee, tenant, now, day_start, sender, result)
        except Exception:
            logger.exception("Morning nudge failed for employee %s", employee.pk)
            result.record_failure(f"employee:{employee.pk}")


def run_morning_nudge_scan(now: datetime | None = None, sender=None) -> ScanResult:
    """Nudge employees who have not checked in shortly after their start time.

    Saturday and Sunday are skipped per tenant, in the tenant local time.
    """
    now = now or timezone.now()
    result = ScanResult(name="morning_nudge")
    sender = _resolve_sender(sender)
    for tenant in Tenant.objects.filter(is_active=True):
        try:
            _nudge_tenant(tenant, now, sender, result)
        except Exception:
            logger.exception("Morning nudge failed for tenant %s", tenant.pk)
            result.record_failure(f"tenant:{tenant.pk}")

    logger.info("Morning nudge completed: %s", result.summary())
    return result


# ==================================================================
# Ghost sessions
# ==================================================================

def _remind_session(session: Attendance, now, cooldown, sender, result: ScanResult):
    tenant = session.employee.tenant
    if not is_ghost(session, tenant.max_work_hours, now):
        return
    result.scanned += 1
    if not claim_ghost_reminder(session, now, cooldown):
        result.skipped += 1
        return

    hours = round(duration(session, now).total_seconds() / 3600)
    action_out = tenant.text("action_out")
    delivered = sender.send_buttons(
        session.employee.phone_number,
        f"\U0001f319 Tu as oublie de partir ?\n\n"
        f"Ta session est ouverte depuis *{hours}h*.\n"
        f"Clique ci-dessous pour faire \"{action_out}\".",
        [{"id": "cmd_bye", "title": "\U0001f3c1 Finir Journee"}],
    )
    if delivered:
        result.sent += 1
    else:
        logger.warning("Ghost reminder for session %s was not delivered", session.pk)


def run_ghost_session_scan(now: datetime | None = None, sender=None) -> ScanResult:
    """Remind employees whose session has stayed open past ``max_work_hours``.

    At most one reminder per session per cooldown period, even when several
    scans overlap.
    """
    now = now or timezone.now()
    cooldown = default_cooldown()
    result = ScanResult(name="ghost_sessions")
    sender = _resolve_sender(sender)

    sessions = (
        Attendance.objects
        .open()
        .filter(check_in__lt=now)
        .select_related("employee__tenant")
        .order_by("check_in")
    )
    for session in sessions:
        try:
            _remind_session(session, now, cooldown, sender, result)
        except Exception:
            logger.exception("Ghost session check failed for session %s", session.pk)
            result.record_failure(f"session:{session.pk}")

    logger.info("Ghost session check completed: %s", result.summary())
    return result
