"""Models for the attendance app."""
from django.db import models

from core.models import TimeStampedModel


class AttendanceQuerySet(models.QuerySet):
    def open(self):
        return self.filter(check_out__isnull=True)

    def for_day(self, tenant, value):
        """Rows whose check-in falls on the tenant-local day of *value*."""
        start, end = tenant.day_bounds(value)
        return self.filter(check_in__gte=start, check_in__lt=end)


class Attendance(TimeStampedModel):
    """One work session: opened by a check-in, closed by a check-out.

    A row with ``check_out`` unset is an *open session*.  An employee has at
    most one open session at a time.
    """

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="attendances",
        verbose_name="employe",
    )
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.CASCADE,
        related_name="attendances",
        verbose_name="entreprise",
    )
    site = models.ForeignKey(
        "tenants.Site",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attendances",
        verbose_name="site",
    )
    check_in = models.DateTimeField("arrivee")
    check_out = models.DateTimeField("depart", null=True, blank=True)
    last_reminder_sent_at = models.DateTimeField(
        "derniere relance de depart",
        null=True,
        blank=True,
    )

    # Geolocation / proof
    latitude = models.FloatField("latitude", null=True, blank=True)
    longitude = models.FloatField("longitude", null=True, blank=True)
    distance_from_site = models.FloatField("distance du site (m)", null=True, blank=True)
    photo_url = models.CharField("photo", max_length=500, blank=True, default="")

    objects = AttendanceQuerySet.as_manager()

    class Meta:
        ordering = ["-check_in"]
        verbose_name = "Pointage"
        verbose_name_plural = "Pointages"
        indexes = [
            models.Index(fields=["check_out"], name="attendance_check_out_idx"),
            models.Index(fields=["employee", "check_in"], name="attendance_employee_day_idx"),
        ]

    def __str__(self):
        return f"{self.employee} - {self.check_in:%Y-%m-%d %H:%M}"

    @property
    def is_open(self) -> bool:
        return self.check_out is None
