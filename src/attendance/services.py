"""Business logic for check-in, check-out and per-session proofs.

The bot passes the WhatsApp message timestamp as ``at`` so that a message
queued while the phone was offline is recorded at the time it was written.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from attendance.lifecycle import duration, format_duration
from attendance.models import Attendance
from employees.models import Employee

logger = logging.getLogger("pointage")

EARTH_RADIUS_METERS = 6371e3


class AttendanceError(ValueError):
    """Check-in/check-out refused; the message is shown to the employee."""


def haversine_distance(lat1, lon1, lat2, lon2) -> int:
    """Great-circle distance between two points, in whole meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    return round(EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a)))


def today_attendance(employee: Employee, now=None) -> Attendance | None:
    """Latest session whose check-in falls on the employee's local today."""
    now = now or timezone.now()
    return (
        Attendance.objects
        .filter(employee=employee)
        .for_day(employee.tenant, now)
        .order_by("-check_in")
        .first()
    )


# ==================================================================
# check_in / check_out
# ==================================================================

@transaction.atomic
def check_in(employee: Employee, *, at=None) -> Attendance:
    """Open a session for *employee* at *at* (defaults to now).

    Raises
    ------
    AttendanceError
        If the employee already checked in on the same local day, or a
        session from an earlier day is still open.
    """
    at = at or timezone.now()
    # Serialise concurrent check-ins of the same employee.
    Employee.objects.select_for_update().only("pk").get(pk=employee.pk)
    tenant = employee.tenant

    existing = Attendance.objects.filter(employee=employee).for_day(tenant, at).first()
    if existing is not None:
        local = tenant.localtime(existing.check_in)
        raise AttendanceError(f"Vous avez deja pointe aujourd'hui a {local:%H:%M}.")

    open_session = Attendance.objects.open().filter(employee=employee).first()
    if open_session is not None:
        local = tenant.localtime(open_session.check_in)
        raise AttendanceError(
            f"Vous avez deja une session ouverte depuis le {local:%d/%m a %H:%M}."
        )

    attendance = Attendance.objects.create(
        employee=employee,
        tenant=tenant,
        site=employee.site,
        check_in=at,
    )
    logger.info("Check-in %s for employee %s", attendance.pk, employee.pk)
    return attendance


@transaction.atomic
def check_out(employee: Employee, *, at=None) -> tuple[Attendance, str]:
    """Close the open session of *employee*.

    Returns the closed session and its duration formatted as ``XhYY``.

    Raises
    ------
    AttendanceError
        If the employee has no open session.
    """
    at = at or timezone.now()
    attendance = (
        Attendance.objects
        .select_for_update()
        .open()
        .filter(employee=employee)
        .order_by("-check_in")
        .first()
    )
    if attendance is None:
        raise AttendanceError(
            "Vous n'avez pas pointe votre arrivee. Envoyez 'Hi' pour commencer votre journee."
        )
    if at < attendance.check_in:
        at = attendance.check_in

    attendance.check_out = at
    attendance.save(update_fields=["check_out", "updated_at"])
    worked = format_duration(duration(attendance, at))
    logger.info("Check-out %s for employee %s (%s)", attendance.pk, employee.pk, worked)
    return attendance, worked


# ==================================================================
# Proofs: location and photo
# ==================================================================

@dataclass(frozen=True)
class LocationCheck:
    attendance: Attendance
    distance: int | None
    radius: int | None

    @property
    def in_range(self) -> bool:
        if self.distance is None:
            return True
        return self.distance <= self.radius


def _reference_point(employee: Employee):
    """Return ``(latitude, longitude, radius)`` to check against, or ``None``."""
    site = employee.site
    if site is not None and site.has_coordinates:
        return site.latitude, site.longitude, site.radius or settings.SITE_DEFAULT_RADIUS_METERS
    tenant = employee.tenant
    if tenant.default_latitude is not None and tenant.default_longitude is not None:
        return tenant.default_latitude, tenant.default_longitude, settings.GEOFENCE_DEFAULT_RADIUS_METERS
    return None


def attach_location(employee: Employee, latitude, longitude, *, now=None, sender=None) -> LocationCheck:
    """Store a shared position on today's session and check the geofence.

    Managers receive a ``GEOFENCE`` notification when the position is out
    of range.

    Raises
    ------
    AttendanceError
        If the employee has not checked in today.
    """
    from notifications.models import Notification
    from notifications.services import notify_all

    now = now or timezone.now()
    attendance = today_attendance(employee, now)
    if attendance is None:
        raise AttendanceError(
            "Vous devez d'abord pointer votre arrivee avec \"Hi\" avant d'envoyer votre position."
        )

    distance = radius = None
    reference = _reference_point(employee)
    if reference is not None:
        ref_lat, ref_lon, radius = reference
        distance = haversine_distance(latitude, longitude, ref_lat, ref_lon)

    attendance.latitude = latitude
    attendance.longitude = longitude
    attendance.distance_from_site = distance
    attendance.save(update_fields=["latitude", "longitude", "distance_from_site", "updated_at"])

    result = LocationCheck(attendance=attendance, distance=distance, radius=radius)
    if not result.in_range:
        logger.info("Employee %s out of range (%sm > %sm)", employee.pk, distance, radius)
        notify_all(
            employee.tenant,
            type=Notification.Type.GEOFENCE,
            title="Pointage hors zone",
            message=f"{employee.name or employee.phone_number} a pointe HORS ZONE (Distance : {distance / 1000:.1f} km).",
            employee=employee,
            now=now,
            sender=sender,
        )
    return result


def attach_photo(employee: Employee, photo_url: str, *, now=None) -> Attendance:
    """Attach a media reference to today's session.

    Raises
    ------
    AttendanceError
        If the employee has not checked in today.
    """
    attendance = today_attendance(employee, now)
    if attendance is None:
        raise AttendanceError(
            "Vous devez d'abord pointer votre arrivee avec \"Hi\" avant d'envoyer une photo."
        )
    attendance.photo_url = photo_url
    attendance.save(update_fields=["photo_url", "updated_at"])
    return attendance
