"""Leave requests over WhatsApp.

An employee writes ``Conge 25/12`` (optionally followed by a reason); every
other active manager of the tenant receives the request with its short
reference.  A manager answers ``OK 3f2a9c1e`` or ``NON 3f2a9c1e`` and the
employee is told the decision.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from django.db import transaction
from django.utils import timezone

from employees.models import Employee
from employees.services import managers_of
from leaves.models import LeaveRequest

logger = logging.getLogger("pointage")

LEAVE_COMMAND = re.compile(
    r"^(?:cong[eé]s?|leave)\s+(?P<date>\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?)(?:\s+(?P<reason>.+))?$",
    re.IGNORECASE | re.DOTALL,
)
MANAGER_RESPONSE = re.compile(
    r"^(?P<verb>[a-z]+)\s*#?\s*(?P<reference>[0-9a-f-]{4,36})\s*$",
    re.IGNORECASE,
)
APPROVE_WORDS = {"OK", "OUI", "APPROVE", "VALIDE", "ACCEPTE"}
REJECT_WORDS = {"NON", "REFUSE", "REJECT", "REJETTE"}

INVALID_DATE = "Format de date invalide. Essayez \"Conge 25/12\" ou \"Conge 25/12/2026\"."


class LeaveError(ValueError):
    """A leave request or decision that cannot be carried out."""


@dataclass(frozen=True)
class LeaveCommand:
    date_text: str
    reason: str = ""


@dataclass(frozen=True)
class ManagerResponse:
    approve: bool
    reference: str


# ==================================================================
# Parsing
# ==================================================================

def parse_leave_command(text) -> LeaveCommand | None:
    """``LeaveCommand`` for ``"Conge 25/12 mariage"``, ``None`` for any other text."""
    match = LEAVE_COMMAND.match((text or "").strip())
    if match is None:
        return None
    return LeaveCommand(match["date"], (match["reason"] or "").strip())


def parse_manager_response(text) -> ManagerResponse | None:
    match = MANAGER_RESPONSE.match((text or "").strip())
    if match is None:
        return None
    verb = match["verb"].upper()
    if verb not in APPROVE_WORDS and verb not in REJECT_WORDS:
        return None
    reference = match["reference"].replace("-", "").lower()[:8]
    if len(reference) < 4:
        return None
    return ManagerResponse(approve=verb in APPROVE_WORDS, reference=reference)


def parse_leave_date(raw, today: date) -> date:
    """Parse ``DD/MM``, ``DD/MM/YY`` or ``DD/MM/YYYY`` (``-`` also accepted).

    A missing year means the year of *today*; a two-digit year is in the
    2000s.

    Raises
    ------
    LeaveError
        If the text is not a calendar date (``31/02``, ``12/13``...).
    """
    parts = re.split(r"[/-]", str(raw or "").strip())
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise LeaveError(INVALID_DATE)

    day, month = int(parts[0]), int(parts[1])
    if len(parts) == 2:
        year = today.year
    elif len(parts[2]) == 2:
        year = 2000 + int(parts[2])
    elif len(parts[2]) == 4:
        year = int(parts[2])
    else:
        raise LeaveError(INVALID_DATE)

    try:
        return date(year, month, day)
    except ValueError:
        raise LeaveError(INVALID_DATE)


# ==================================================================
# Request and decision
# ==================================================================

def _resolve_sender(sender):
    if sender is not None:
        return sender
    from messaging.client import get_sender
    return get_sender()


def _manager_message(leave: LeaveRequest, employee: Employee) -> str:
    lines = [
        "\U0001f4cb *Nouvelle demande de conge*",
        "",
        f"\U0001f464 De : *{employee.name or employee.phone_number}*",
        f"\U0001f4c5 Date : *{leave.start_date:%d/%m/%Y}*",
    ]
    if leave.reason:
        lines.append(f"\U0001f4ac Motif : {leave.reason}")
    lines += [
        f"\U0001f194 ID : *#{leave.reference}*",
        "",
        "Repondez :",
        f"• *OK {leave.reference}* pour approuver",
        f"• *NON {leave.reference}* pour refuser",
    ]
    return "\n".join(lines)


def request_leave(employee: Employee, raw_date, *, reason="", now=None, sender=None) -> LeaveRequest:
    """Create a one-day leave request and forward it to the managers.

    Raises
    ------
    LeaveError
        If leave requests are disabled for the tenant, the date is invalid,
        or the tenant has no other active manager to decide.
    """
    now = now or timezone.now()
    tenant = employee.tenant
    if not tenant.is_feature_enabled("enable_leave_requests"):
        raise LeaveError("Les demandes de conge ne sont pas activees pour votre entreprise.")

    day = parse_leave_date(raw_date, tenant.localtime(now).date())
    managers = list(managers_of(tenant).exclude(pk=employee.pk))
    if not managers:
        raise LeaveError("Aucun manager trouve pour votre entreprise. Contactez votre RH.")

    leave = LeaveRequest.objects.create(
        employee=employee,
        tenant=tenant,
        start_date=day,
        end_date=day,
        reason=reason,
    )
    logger.info("Leave request %s created for employee %s", leave.pk, employee.pk)

    sender = _resolve_sender(sender)
    body = _manager_message(leave, employee)
    for manager in managers:
        try:
            sender.send_text(manager.phone_number, body)
        except Exception:
            logger.exception("Leave request %s could not be sent to manager %s", leave.pk, manager.pk)
    return leave


def respond_to_leave(manager: Employee, response: ManagerResponse, *, now=None, sender=None) -> LeaveRequest:
    """Apply a manager decision to the pending request matching its reference.

    Raises
    ------
    LeaveError
        If no pending request of the manager's tenant matches, or the
        manager tries to decide their own request.
    """
    now = now or timezone.now()
    with transaction.atomic():
        leave = (
            LeaveRequest.objects
            .select_for_update()
            .select_related("employee")
            .filter(
                tenant_id=manager.tenant_id,
                status=LeaveRequest.Status.PENDING,
                reference__startswith=response.reference,
            )
            .first()
        )
        if leave is None:
            raise LeaveError(f"Demande #{response.reference} introuvable ou deja traitee.")
        if leave.employee_id == manager.pk:
            raise LeaveError("Vous ne pouvez pas traiter votre propre demande.")
        leave.status = LeaveRequest.Status.APPROVED if response.approve else LeaveRequest.Status.REJECTED
        leave.reviewed_by = manager
        leave.reviewed_at = now
        leave.save(update_fields=["status", "reviewed_by", "reviewed_at", "updated_at"])

    logger.info("Leave request %s %s by manager %s", leave.pk, leave.status, manager.pk)

    if response.approve:
        body = (
            f"\U0001f389 *Bonne nouvelle !*\n\nVotre demande de conge #{leave.reference} "
            f"du {leave.start_date:%d/%m/%Y} a ete *approuvee*."
        )
    else:
        body = (
            f"\U0001f614 *Demande refusee*\n\nVotre demande de conge #{leave.reference} "
            f"du {leave.start_date:%d/%m/%Y} a ete *refusee* par votre manager. "
            "Contactez-le pour plus d'informations."
        )
    try:
        _resolve_sender(sender).send_text(leave.employee.phone_number, body)
    except Exception:
        logger.exception("Leave decision %s could not be sent to employee %s", leave.pk, leave.employee_id)
    return leave
