"""Notification dispatcher: persist an alert for a manager, then push it.

``LATE`` and ``ABSENCE`` alerts about an employee are rate-limited to one
per (manager, type, employee) per tenant-local day.  The existence check
and the insert run under a row lock on the manager, so two scans racing
on the same manager cannot both insert.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from employees.models import Employee
from employees.services import managers_of
from notifications.models import Notification

logger = logging.getLogger("pointage")

ANTI_SPAM_TYPES = (Notification.Type.LATE, Notification.Type.ABSENCE)

EMOJIS = {
    Notification.Type.LATE: "⏰",
    Notification.Type.ABSENCE: "\U0001f6ab",
    Notification.Type.GEOFENCE: "\U0001f4cd",
    Notification.Type.EXPENSE: "\U0001f4b0",
}


def _resolve_sender(sender):
    if sender is not None:
        return sender
    from messaging.client import get_sender
    return get_sender()


def format_whatsapp_message(notification: Notification) -> str:
    emoji = EMOJIS.get(notification.type, "\U0001f514")
    return (
        f"{emoji} *Alerte {notification.type}*\n\n"
        f"{notification.message}\n\n"
        "_Connectez-vous au tableau de bord pour gerer._"
    )


def already_notified(manager, tenant, type, employee, now) -> bool:
    start, end = tenant.day_bounds(now)
    return Notification.objects.filter(
        manager=manager,
        type=type,
        employee=employee,
        created_at__gte=start,
        created_at__lt=end,
    ).exists()


def notify(manager, tenant, type, title, message, employee=None, *, now=None, sender=None) -> Notification | None:
    """Create a notification for *manager* and send it on WhatsApp.

    Returns
    -------
    Notification or None
        ``None`` when the anti-spam rule suppressed the alert.

    The row is committed before the send; a transport failure is logged
    and does not roll it back.
    """
    now = now or timezone.now()

    with transaction.atomic():
        if employee is not None and type in ANTI_SPAM_TYPES:
            Employee.objects.select_for_update().only("pk").get(pk=manager.pk)
            if already_notified(manager, tenant, type, employee, now):
                logger.debug(
                    "Anti-spam: manager %s already notified about %s for %s today",
                    manager.pk, type, employee.pk,
                )
                return None

        notification = Notification.objects.create(
            manager=manager,
            tenant=tenant,
            type=type,
            title=title,
            message=message,
            employee=employee,
            created_at=now,
        )

    logger.info("Notification %s created: [%s] %s", notification.pk, type, title)

    if manager.phone_number:
        try:
            sent = _resolve_sender(sender).send_text(manager.phone_number, format_whatsapp_message(notification))
        except Exception:
            logger.exception("WhatsApp push of notification %s failed", notification.pk)
        else:
            if not sent:
                logger.warning("WhatsApp push of notification %s was not delivered", notification.pk)

    return notification


def notify_all(tenant, *, type, title, message, employee=None, now=None, sender=None) -> list[Notification]:
    """Notify every active manager of *tenant*; one failure does not stop the others."""
    created = []
    managers = managers_of(tenant)
    for manager in managers:
        try:
            notification = notify(
                manager, tenant, type, title, message, employee,
                now=now, sender=sender,
            )
        except Exception:
            logger.exception("Failed to notify manager %s", manager.pk)
            continue
        if notification is not None:
            created.append(notification)
    return created


def unread_count(manager) -> int:
    return Notification.objects.filter(manager=manager, is_read=False).count()


def mark_as_read(notification: Notification) -> Notification:
    """Mark *notification* as read; idempotent."""
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at", "updated_at"])
    return notification


def mark_all_as_read(manager) -> int:
    return Notification.objects.filter(manager=manager, is_read=False).update(
        is_read=True,
        read_at=timezone.now(),
    )
