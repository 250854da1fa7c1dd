from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from bot.handler import handle_message
from bot.webhook import InboundMessage
from employees.models import Employee
from employees.services import archive_employee, register_employee
from leaves.models import LeaveRequest
from leaves.services import (
    LeaveError,
    ManagerResponse,
    parse_leave_command,
    parse_leave_date,
    parse_manager_response,
    request_leave,
    respond_to_leave,
)
from tenants.models import Tenant

PARIS = ZoneInfo("Europe/Paris")
TUESDAY_1000 = datetime(2026, 3, 10, 10, 0, tzinfo=PARIS)
TODAY = date(2026, 3, 10)

_counter = iter(range(1, 10_000))


def say(employee, body, sender):
    message = InboundMessage(
        message_id=f"wamid.LEAVE{next(_counter)}",
        sender=employee.phone_number,
        type="text",
        text=body,
        timestamp=TUESDAY_1000,
    )
    return handle_message(message, sender=sender, now=TUESDAY_1000)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw,expected",
    [
        ("25/12", date(2026, 12, 25)),
        ("5-1", date(2026, 1, 5)),
        ("25/12/2027", date(2027, 12, 25)),
        ("25/12/27", date(2027, 12, 25)),
        ("29/02/2028", date(2028, 2, 29)),
    ],
)
def test_parse_leave_date_accepts_day_month_and_optional_year(raw, expected):
    assert parse_leave_date(raw, TODAY) == expected


@pytest.mark.parametrize("raw", ["31/02", "29/02/2027", "12/13", "00/05", "25/12/202", "", "demain"])
def test_parse_leave_date_rejects_impossible_dates(raw):
    with pytest.raises(LeaveError, match="Format de date invalide"):
        parse_leave_date(raw, TODAY)


@pytest.mark.parametrize(
    "text,date_text,reason",
    [
        ("Conge 25/12", "25/12", ""),
        ("congé 25/12/2026", "25/12/2026", ""),
        ("CONGÉS 3-4 mariage de ma soeur", "3-4", "mariage de ma soeur"),
        ("leave 01/05", "01/05", ""),
    ],
)
def test_parse_leave_command(text, date_text, reason):
    command = parse_leave_command(text)

    assert command.date_text == date_text
    assert command.reason == reason


@pytest.mark.parametrize("text", ["conge", "conge demain", "je veux un conge 25/12", "", None])
def test_parse_leave_command_ignores_other_text(text):
    assert parse_leave_command(text) is None


@pytest.mark.parametrize(
    "text,approve,reference",
    [
        ("OK 3f2a9c1e", True, "3f2a9c1e"),
        ("oui #3F2A9C1E", True, "3f2a9c1e"),
        ("valide 3f2a", True, "3f2a"),
        ("NON 3f2a9c1e", False, "3f2a9c1e"),
        ("rejette #3f2a9c1e-77aa", False, "3f2a9c1e"),
    ],
)
def test_parse_manager_response(text, approve, reference):
    assert parse_manager_response(text) == ManagerResponse(approve=approve, reference=reference)


@pytest.mark.parametrize("text", ["ok", "okay", "non merci", "peut-etre 3f2a9c1e", "hi"])
def test_parse_manager_response_ignores_other_text(text):
    assert parse_manager_response(text) is None


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_request_leave_notifies_every_manager(employee, manager, second_manager, sender):
    leave = request_leave(employee, "25/12", reason="Noel", now=TUESDAY_1000, sender=sender)

    assert leave.status == LeaveRequest.Status.PENDING
    assert leave.start_date == leave.end_date == date(2026, 12, 25)
    assert leave.reference == leave.pk.hex[:8]
    assert leave.tenant == employee.tenant
    for recipient in (manager, second_manager):
        (sent,) = sender.to(recipient.phone_number)
        assert "Nouvelle demande de conge" in sent.body
        assert "Jean Dupont" in sent.body
        assert "25/12/2026" in sent.body
        assert "Motif : Noel" in sent.body
        assert f"OK {leave.reference}" in sent.body


@pytest.mark.django_db
def test_request_leave_without_manager_is_refused(employee, manager, sender):
    archive_employee(manager)

    with pytest.raises(LeaveError, match="Aucun manager"):
        request_leave(employee, "25/12", now=TUESDAY_1000, sender=sender)

    assert not LeaveRequest.objects.exists()


@pytest.mark.django_db
def test_manager_request_goes_to_the_other_managers(manager, second_manager, sender):
    request_leave(manager, "25/12", now=TUESDAY_1000, sender=sender)

    assert sender.to(manager.phone_number) == []
    assert len(sender.to(second_manager.phone_number)) == 1


@pytest.mark.django_db
def test_one_unreachable_manager_does_not_lose_the_request(employee, manager, second_manager, sender):
    sender.raise_for.add(manager.phone_number)

    leave = request_leave(employee, "25/12", now=TUESDAY_1000, sender=sender)

    assert LeaveRequest.objects.filter(pk=leave.pk).exists()
    assert len(sender.to(second_manager.phone_number)) == 1


@pytest.mark.django_db
def test_leave_requests_disabled_for_tenant(tenant, employee, manager, sender):
    tenant.config = {"enable_leave_requests": False}
    tenant.save(update_fields=["config"])

    with pytest.raises(LeaveError, match="pas activees"):
        request_leave(employee, "25/12", now=TUESDAY_1000, sender=sender)


@pytest.mark.django_db
def test_approval_is_recorded_and_employee_is_told(employee, manager, sender):
    leave = request_leave(employee, "25/12", now=TUESDAY_1000, sender=sender)

    respond_to_leave(manager, ManagerResponse(True, leave.reference), now=TUESDAY_1000, sender=sender)

    leave.refresh_from_db()
    assert leave.status == LeaveRequest.Status.APPROVED
    assert leave.reviewed_by == manager
    assert leave.reviewed_at == TUESDAY_1000
    (notice,) = sender.to(employee.phone_number)
    assert "Bonne nouvelle" in notice.body
    assert "*approuvee*" in notice.body


@pytest.mark.django_db
def test_decided_request_cannot_be_decided_again(employee, manager, second_manager, sender):
    leave = request_leave(employee, "25/12", now=TUESDAY_1000, sender=sender)
    respond_to_leave(manager, ManagerResponse(False, leave.reference), now=TUESDAY_1000, sender=sender)

    with pytest.raises(LeaveError, match="introuvable ou deja traitee"):
        respond_to_leave(second_manager, ManagerResponse(True, leave.reference), sender=sender)

    leave.refresh_from_db()
    assert leave.status == LeaveRequest.Status.REJECTED
    assert leave.reviewed_by == manager


@pytest.mark.django_db
def test_manager_of_another_tenant_cannot_decide(employee, manager, sender):
    leave = request_leave(employee, "25/12", now=TUESDAY_1000, sender=sender)
    elsewhere = Tenant.objects.create(name="Autre Boite")
    outsider = register_employee(
        tenant=elsewhere, phone_number="+33 6 00 00 00 08", role=Employee.Role.MANAGER,
    )

    with pytest.raises(LeaveError, match="introuvable"):
        respond_to_leave(outsider, ManagerResponse(True, leave.reference), sender=sender)

    leave.refresh_from_db()
    assert leave.status == LeaveRequest.Status.PENDING


@pytest.mark.django_db
def test_manager_cannot_decide_their_own_request(manager, second_manager, sender):
    leave = request_leave(manager, "25/12", now=TUESDAY_1000, sender=sender)

    with pytest.raises(LeaveError, match="propre demande"):
        respond_to_leave(manager, ManagerResponse(True, leave.reference), sender=sender)


# ---------------------------------------------------------------------------
# Through the bot
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_leave_round_trip_through_the_bot(employee, manager, sender):
    reply = say(employee, "Congé 25/12", sender)

    assert reply.text.startswith("✅ Demande de conge envoyee au manager pour le 25/12/2026")
    leave = LeaveRequest.objects.get(employee=employee)

    reply = say(manager, f"NON {leave.reference}", sender)

    assert reply.text == f"✅ Demande #{leave.reference} refusee ❌."
    leave.refresh_from_db()
    assert leave.status == LeaveRequest.Status.REJECTED
    assert "Demande refusee" in sender.to(employee.phone_number)[-1].body


@pytest.mark.django_db
def test_invalid_leave_date_gets_a_warning(employee, manager, sender):
    reply = say(employee, "conge 31/02", sender)

    assert reply.text.startswith("⚠️ Format de date invalide")
    assert not LeaveRequest.objects.exists()


@pytest.mark.django_db
def test_unknown_reference_gets_a_warning(employee, manager, sender):
    reply = say(manager, "OK deadbeef", sender)

    assert reply.text == "⚠️ Demande #deadbeef introuvable ou deja traitee."


@pytest.mark.django_db
def test_employee_cannot_answer_a_leave_request(employee, manager, second_manager, sender):
    leave = request_leave(manager, "25/12", now=TUESDAY_1000, sender=sender)

    reply = say(employee, f"OK {leave.reference}", sender)

    assert "Je ne comprends pas" in reply.text
    leave.refresh_from_db()
    assert leave.status == LeaveRequest.Status.PENDING


@pytest.mark.django_db
def test_manager_help_lists_leave_commands(manager, sender):
    reply = say(manager, "help", sender)

    assert "Conge JJ/MM" in reply.text
    assert "*OK id*" in reply.text
