"""Celery tasks for the reminders app."""
import logging

from celery import shared_task

logger = logging.getLogger("pointage")


@shared_task(name="reminders.tasks.morning_nudge")
def morning_nudge():
    """Nudge employees missing their morning check-in; alert their managers."""
    from reminders.services import run_morning_nudge_scan

    return run_morning_nudge_scan().summary()


@shared_task(name="reminders.tasks.ghost_sessions")
def ghost_sessions():
    """Remind employees whose session has been left open too long."""
    from reminders.services import run_ghost_session_scan

    return run_ghost_session_scan().summary()
