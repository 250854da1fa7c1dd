from datetime import datetime
from io import StringIO
from zoneinfo import ZoneInfo

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from attendance.services import check_in
from config.celery import app
from reminders.schedules import GHOST_SESSION, MORNING_NUDGE
from reminders.tasks import ghost_sessions, morning_nudge

PARIS = ZoneInfo("Europe/Paris")


@pytest.mark.parametrize(
    "hour,minute,morning,ghost",
    [(8, 0, True, True), (8, 30, True, False), (8, 31, False, False), (23, 0, True, True)],
)
def test_schedules_are_due_on_their_minutes(hour, minute, morning, ghost):
    now = datetime(2026, 3, 10, hour, minute, tzinfo=PARIS)

    assert MORNING_NUDGE.is_due(now) is morning
    assert GHOST_SESSION.is_due(now) is ghost


def test_is_due_uses_platform_local_time():
    # 07:30 UTC is 08:30 in Paris.
    assert MORNING_NUDGE.is_due(datetime(2026, 3, 10, 7, 30, tzinfo=ZoneInfo("UTC")))


def test_beat_schedule_is_built_from_scan_schedules():
    beat = app.conf.beat_schedule

    assert beat["reminders-morning-nudge"]["task"] == MORNING_NUDGE.task
    assert beat["reminders-morning-nudge"]["schedule"] == MORNING_NUDGE.as_crontab()
    assert beat["reminders-ghost-sessions"]["schedule"] == GHOST_SESSION.as_crontab()
    assert GHOST_SESSION.as_crontab().minute == {0}
    assert MORNING_NUDGE.as_crontab().minute == {0, 30}


@pytest.mark.django_db
def test_ghost_sessions_task_returns_summary(employee, sender):
    check_in(employee, at=datetime(2026, 3, 9, 9, 0, tzinfo=PARIS))

    summary = ghost_sessions()

    assert summary.startswith("ghost_sessions: 1 scanned, 1 sent")
    assert len(sender.to(employee.phone_number)) == 1


@pytest.mark.django_db
def test_morning_nudge_task_runs_through_celery(sender):
    result = morning_nudge.delay()

    assert result.get().startswith("morning_nudge:")


@pytest.mark.django_db
def test_run_reminders_command_with_frozen_clock(employee, manager, sender):
    out = StringIO()

    call_command("run_reminders", "morning_nudge", "--now", "2026-03-10T08:31", stdout=out)

    assert "morning_nudge: 1 scanned, 1 sent, 1 notifications, 0 failures" in out.getvalue()
    assert len(sender.to(employee.phone_number)) == 1


@pytest.mark.django_db
def test_run_reminders_tick_skips_scans_not_due(employee, sender):
    check_in(employee, at=datetime(2026, 3, 9, 9, 0, tzinfo=PARIS))
    out = StringIO()

    call_command("run_reminders", "--now", "2026-03-10T08:30", "--tick", stdout=out)

    output = out.getvalue()
    assert "ghost_sessions: not due at 08:30, skipped" in output
    assert "morning_nudge: 1 scanned" in output
    assert sender.to(employee.phone_number)[0].buttons[0]["id"] == "cmd_hi"


@pytest.mark.django_db
def test_run_reminders_rejects_bad_clock():
    with pytest.raises(CommandError):
        call_command("run_reminders", "--now", "yesterday")


@pytest.mark.django_db
def test_run_reminders_all_runs_both_scans(employee, sender):
    check_in(employee, at=datetime(2026, 3, 9, 9, 0, tzinfo=PARIS))
    out = StringIO()

    call_command("run_reminders", "--now", "2026-03-14T09:00:00+01:00", stdout=out)

    output = out.getvalue()
    assert "morning_nudge: 0 scanned" in output
    assert "ghost_sessions: 1 scanned, 1 sent" in output
