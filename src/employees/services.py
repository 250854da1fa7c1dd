"""Service functions for the employees app."""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from employees.models import Employee
from employees.phones import normalize_phone

logger = logging.getLogger("pointage")


def resolve_identity(raw_phone) -> Employee | None:
    """Return the active employee owning *raw_phone*, with its tenant loaded.

    Unknown, archived or malformed numbers all resolve to ``None``; callers
    branch on presence.
    """
    phone = normalize_phone(raw_phone)
    if phone is None:
        return None
    return (
        Employee.objects
        .active()
        .filter(phone_number=phone, tenant__is_active=True)
        .select_related("tenant", "site")
        .first()
    )


def register_employee(*, tenant, phone_number, name="", role=Employee.Role.EMPLOYEE, site=None) -> Employee:
    """Create an employee after normalising *phone_number*.

    Used by onboarding and bulk import so that stored numbers always match
    what the webhook looks up.

    Raises
    ------
    ValueError
        If the number is malformed or already registered.
    """
    phone = normalize_phone(phone_number, tenant.country)
    if phone is None:
        raise ValueError(f"Numero de telephone invalide : {phone_number!r}.")
    if site is not None and site.tenant_id != tenant.pk:
        raise ValueError("Le site n'appartient pas a cette entreprise.")

    try:
        with transaction.atomic():
            employee = Employee.objects.create(
                tenant=tenant,
                site=site,
                phone_number=phone,
                name=(name or "").strip(),
                role=role,
            )
    except IntegrityError:
        raise ValueError(f"Le numero {phone} est deja enregistre.")

    logger.info("Employee %s registered for tenant %s", employee.pk, tenant.pk)
    return employee


def archive_employee(employee: Employee) -> Employee:
    """Soft-disable *employee*; conversation in progress is discarded."""
    employee.is_active = False
    employee.conversation_state = None
    employee.temp_expense_data = None
    employee.save(update_fields=["is_active", "conversation_state", "temp_expense_data", "updated_at"])
    return employee


def managers_of(tenant):
    """Active managers of *tenant*: the recipients of alerts and leave requests."""
    return Employee.objects.active().managers().filter(tenant=tenant)
