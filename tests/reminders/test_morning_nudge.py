from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from attendance.services import check_in
from employees.models import Employee
from employees.services import register_employee
from notifications.models import Notification
from reminders.services import in_nudge_window, run_morning_nudge_scan
from tenants.models import Tenant

PARIS = ZoneInfo("Europe/Paris")
TUESDAY = datetime(2026, 3, 10, tzinfo=PARIS)
SATURDAY = datetime(2026, 3, 14, tzinfo=PARIS)


def at(day, hour, minute):
    return day.replace(hour=hour, minute=minute)


def late_alerts():
    return Notification.objects.filter(type=Notification.Type.LATE)


@pytest.mark.parametrize(
    "hour,minute,expected",
    [(8, 29, False), (8, 30, True), (8, 45, True), (8, 59, True), (9, 0, False)],
)
def test_nudge_window_is_half_open(hour, minute, expected):
    assert in_nudge_window(time(8, 0), datetime(2026, 3, 10, hour, minute)) is expected


@pytest.mark.django_db
def test_missing_check_in_nudges_employee_and_alerts_each_manager(
    employee, manager, second_manager, sender,
):
    result = run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    assert result.scanned == 1
    assert result.sent == 1
    assert result.notifications == 2
    nudges = sender.to(employee.phone_number)
    assert len(nudges) == 1
    assert "Salut Jean" in nudges[0].body
    assert "chantier" in nudges[0].body
    assert nudges[0].buttons == [{"id": "cmd_hi", "title": "✅ Pointer Arrivee"}]
    assert set(late_alerts().values_list("manager_id", flat=True)) == {manager.pk, second_manager.pk}
    assert not sender.to(manager.phone_number)[0].buttons


@pytest.mark.django_db
def test_rerun_in_window_does_not_repeat(employee, manager, sender):
    run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)
    sender.messages.clear()

    result = run_morning_nudge_scan(at(TUESDAY, 8, 45), sender=sender)

    assert result.sent == 0
    assert result.skipped == 1
    assert result.notifications == 0
    assert sender.messages == []
    assert late_alerts().count() == 1


@pytest.mark.django_db
def test_employee_who_checked_in_is_skipped(employee, manager, sender):
    run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)
    check_in(employee, at=at(TUESDAY, 8, 40))
    sender.messages.clear()

    result = run_morning_nudge_scan(at(TUESDAY, 8, 45), sender=sender)

    assert result.scanned == 1
    assert result.skipped == 0
    assert sender.messages == []


@pytest.mark.django_db
def test_nudge_is_sent_again_the_next_working_day(employee, manager, sender):
    run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    result = run_morning_nudge_scan(at(TUESDAY + timedelta(days=1), 8, 31), sender=sender)

    assert result.sent == 1
    assert late_alerts().count() == 2


@pytest.mark.django_db
def test_weekend_scan_does_nothing(employee, manager, sender):
    result = run_morning_nudge_scan(at(SATURDAY, 8, 31), sender=sender)

    assert result.scanned == 0
    assert result.sent == 0
    assert sender.messages == []
    assert not Notification.objects.exists()


@pytest.mark.django_db
def test_outside_window_does_nothing(employee, manager, sender):
    for hour, minute in ((8, 15), (9, 5)):
        result = run_morning_nudge_scan(at(TUESDAY, hour, minute), sender=sender)
        assert result.scanned == 0

    assert sender.messages == []


@pytest.mark.django_db
def test_managers_are_not_nudged(manager, sender):
    result = run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    assert result.scanned == 1
    assert sender.messages == []


@pytest.mark.django_db
def test_archived_employee_is_not_nudged(employee, manager, sender):
    Employee.objects.filter(pk=employee.pk).update(is_active=False)

    run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    assert sender.to(employee.phone_number) == []


@pytest.mark.django_db
def test_tenant_with_reminders_disabled_is_skipped(tenant, employee, manager, sender):
    tenant.config = {"enable_reminders": False}
    tenant.save(update_fields=["config"])

    result = run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    assert result.scanned == 0
    assert sender.messages == []


@pytest.mark.django_db
def test_window_is_evaluated_in_tenant_local_time(sender):
    remote = Tenant.objects.create(
        name="New York Retail",
        industry=Tenant.Industry.RETAIL,
        work_start_time=time(8, 0),
        timezone="America/New_York",
    )
    worker = register_employee(tenant=remote, phone_number="+1 212 736 5000", name="Ann Lee")

    # 08:31 in Paris is 03:31 in New York.
    assert run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender).scanned == 0
    # 13:31 in Paris is 08:31 in New York.
    result = run_morning_nudge_scan(at(TUESDAY, 13, 31), sender=sender)

    assert result.scanned == 1
    assert len(sender.to(worker.phone_number)) == 1


@pytest.mark.django_db
def test_one_failing_employee_does_not_stop_the_scan(tenant, employee, manager, sender):
    other = register_employee(tenant=tenant, phone_number="+33 6 00 00 00 03", name="Paul Durand")
    sender.raise_for.add(employee.phone_number)

    result = run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    assert result.failures == 1
    assert result.errors == [f"employee:{employee.pk}"]
    assert len(sender.to(other.phone_number)) == 1
    assert late_alerts().filter(employee=other).count() == 1
    assert late_alerts().filter(employee=employee).count() == 1
    assert sender.to(manager.phone_number)


@pytest.mark.django_db
def test_undelivered_nudge_is_not_counted_as_sent(employee, sender):
    sender.fail = True

    result = run_morning_nudge_scan(at(TUESDAY, 8, 31), sender=sender)

    assert result.sent == 0
    employee.refresh_from_db()
    assert employee.last_nudge_sent_at == at(TUESDAY, 8, 31)


@pytest.mark.django_db
def test_weekday_is_evaluated_in_tenant_local_time(sender):
    sydney = Tenant.objects.create(
        name="Sydney Logistics",
        industry=Tenant.Industry.OFFICE,
        work_start_time=time(8, 0),
        timezone="Australia/Sydney",
        country="AU",
    )
    worker = register_employee(tenant=sydney, phone_number="+61 412 345 678", name="Mia Chen")
    # Monday 08:31 in Sydney is still Sunday 22:31 in Paris.
    monday_morning = datetime(2026, 3, 9, 8, 31, tzinfo=ZoneInfo("Australia/Sydney"))

    result = run_morning_nudge_scan(monday_morning, sender=sender)

    assert result.scanned == 1
    assert result.sent == 1
    assert len(sender.to(worker.phone_number)) == 1
