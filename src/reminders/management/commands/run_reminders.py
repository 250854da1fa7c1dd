"""Run the reminder scans once, outside Celery beat."""
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from reminders import schedules
from reminders.services import run_ghost_session_scan, run_morning_nudge_scan

SCANS = {
    schedules.MORNING_NUDGE.name: (schedules.MORNING_NUDGE, run_morning_nudge_scan),
    schedules.GHOST_SESSION.name: (schedules.GHOST_SESSION, run_ghost_session_scan),
}


class Command(BaseCommand):
    help = "Run the morning-nudge and/or ghost-session scans"

    def add_arguments(self, parser):
        parser.add_argument(
            "scan",
            nargs="?",
            default="all",
            choices=["all", *SCANS],
            help="Scan to run (default: all).",
        )
        parser.add_argument(
            "--now",
            help="Run as if the current time were this ISO datetime (e.g. 2026-03-10T08:31).",
        )
        parser.add_argument(
            "--tick",
            action="store_true",
            help="Only run scans whose schedule is due at --now (cron-style invocation).",
        )

    def handle(self, *args, **options):
        now = self._parse_now(options["now"])
        names = list(SCANS) if options["scan"] == "all" else [options["scan"]]

        for name in names:
            schedule, run = SCANS[name]
            if options["tick"] and not schedule.is_due(now):
                self.stdout.write(f"{name}: not due at {timezone.localtime(now):%H:%M}, skipped")
                continue
            result = run(now)
            style = self.style.WARNING if result.failures else self.style.SUCCESS
            self.stdout.write(style(result.summary()))

    def _parse_now(self, raw):
        if not raw:
            return timezone.now()
        value = parse_datetime(raw)
        if value is None:
            raise CommandError(f"Invalid --now value: {raw!r}")
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        return value
