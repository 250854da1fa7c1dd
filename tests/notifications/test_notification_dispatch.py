from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from notifications.models import Notification
from notifications.services import (
    format_whatsapp_message,
    mark_all_as_read,
    mark_as_read,
    notify,
    notify_all,
    unread_count,
)

PARIS = ZoneInfo("Europe/Paris")
TUESDAY_0831 = datetime(2026, 3, 10, 8, 31, tzinfo=PARIS)


def _late(manager, tenant, employee, now, sender):
    return notify(
        manager, tenant, Notification.Type.LATE, "Retard", "Jean n'a pas pointe.", employee,
        now=now, sender=sender,
    )


@pytest.mark.django_db
def test_late_notification_is_sent_once_per_local_day(manager, tenant, employee, sender):
    first = _late(manager, tenant, employee, TUESDAY_0831, sender)
    second = _late(manager, tenant, employee, TUESDAY_0831 + timedelta(minutes=14), sender)

    assert first is not None
    assert second is None
    assert Notification.objects.filter(manager=manager, type=Notification.Type.LATE).count() == 1
    assert len(sender.to(manager.phone_number)) == 1


@pytest.mark.django_db
def test_late_notification_is_allowed_again_next_local_day(manager, tenant, employee, sender):
    _late(manager, tenant, employee, TUESDAY_0831, sender)

    assert _late(manager, tenant, employee, TUESDAY_0831 + timedelta(days=1), sender) is not None


@pytest.mark.django_db
def test_local_day_boundary_follows_tenant_timezone(manager, tenant, employee, sender):
    # 23:30 and 00:30 Paris time are different days even though both are
    # on the same UTC date.
    late_evening = datetime(2026, 3, 10, 23, 30, tzinfo=PARIS)
    _late(manager, tenant, employee, late_evening, sender)

    assert _late(manager, tenant, employee, late_evening + timedelta(hours=1), sender) is not None


@pytest.mark.django_db
def test_geofence_and_expense_are_not_rate_limited(manager, tenant, employee, sender):
    for _ in range(2):
        notify(
            manager, tenant, Notification.Type.GEOFENCE, "Hors zone", "Distance : 2.1 km", employee,
            now=TUESDAY_0831, sender=sender,
        )

    assert Notification.objects.filter(type=Notification.Type.GEOFENCE).count() == 2


@pytest.mark.django_db
def test_notification_is_persisted_when_the_send_fails(manager, tenant, employee, sender):
    sender.raise_for.add(manager.phone_number)

    notification = _late(manager, tenant, employee, TUESDAY_0831, sender)

    assert notification is not None
    assert Notification.objects.filter(pk=notification.pk).exists()


@pytest.mark.django_db
def test_notification_is_persisted_when_the_send_is_not_delivered(manager, tenant, employee, sender):
    sender.fail = True

    assert _late(manager, tenant, employee, TUESDAY_0831, sender) is not None
    assert Notification.objects.count() == 1


@pytest.mark.django_db
def test_notify_all_reaches_every_active_manager(manager, second_manager, tenant, employee, sender):
    sender.raise_for.add(manager.phone_number)

    created = notify_all(
        tenant, type=Notification.Type.LATE, title="Retard", message="Jean est en retard.",
        employee=employee, now=TUESDAY_0831, sender=sender,
    )

    assert {n.manager_id for n in created} == {manager.pk, second_manager.pk}
    assert len(sender.to(second_manager.phone_number)) == 1


@pytest.mark.django_db
def test_notify_all_skips_archived_managers(manager, second_manager, tenant, sender):
    second_manager.is_active = False
    second_manager.save(update_fields=["is_active"])

    created = notify_all(tenant, type=Notification.Type.EXPENSE, title="Frais", message="x", sender=sender)

    assert [n.manager_id for n in created] == [manager.pk]


@pytest.mark.django_db
def test_whatsapp_push_format(manager, tenant, sender):
    notification = notify(
        manager, tenant, Notification.Type.EXPENSE, "Frais", "Note de 25.50 EUR.", sender=sender,
    )

    body = format_whatsapp_message(notification)
    assert body.startswith("\U0001f4b0 *Alerte EXPENSE*")
    assert "Note de 25.50 EUR." in body
    assert sender.messages[0].body == body


@pytest.mark.django_db
def test_unread_count_and_mark_as_read(manager, tenant, employee, sender):
    first = _late(manager, tenant, employee, TUESDAY_0831, sender)
    notify(manager, tenant, Notification.Type.EXPENSE, "Frais", "x", sender=sender)
    assert unread_count(manager) == 2

    mark_as_read(first)
    read_at = first.read_at
    mark_as_read(first)

    assert first.read_at == read_at
    assert unread_count(manager) == 1
    assert mark_all_as_read(manager) == 1
    assert unread_count(manager) == 0
