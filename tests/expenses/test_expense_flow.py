from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from employees import conversation
from employees.conversation import ConversationError
from employees.models import ConversationState
from employees.services import register_employee
from expenses.models import Expense
from expenses.services import (
    approve_expense,
    cancel_expense,
    category_buttons,
    commit_expense,
    parse_amount,
    parse_category,
    record_expense_amount,
    record_expense_photo,
    reject_expense,
    start_expense,
)
from notifications.models import Notification
from tenants.models import Tenant

PARIS = ZoneInfo("Europe/Paris")
NOW = datetime(2026, 3, 10, 12, 30, tzinfo=PARIS)


@pytest.fixture
def draft_ready(employee):
    start_expense(employee)
    record_expense_photo(employee, "whatsapp-media:receipt")
    record_expense_amount(employee, "25,50 €")
    return employee


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("25.50", Decimal("25.50")),
        ("25,50 €", Decimal("25.50")),
        ("1 200", Decimal("1200.00")),
        ("12 euros", Decimal("12.00")),
        ("7", Decimal("7.00")),
    ],
)
def test_parse_amount_accepts_common_formats(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "douze", None])
def test_parse_amount_rejects_text(raw):
    with pytest.raises(ValueError, match="Montant invalide"):
        parse_amount(raw)


@pytest.mark.parametrize("raw", ["0", "-5", "nan", "1000000000"])
def test_parse_amount_rejects_out_of_range(raw):
    with pytest.raises(ValueError, match="strictement superieur"):
        parse_amount(raw)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1", Expense.Category.REPAS),
        ("essence", Expense.Category.ESSENCE),
        ("Hôtel", Expense.Category.HOTEL),
        ("cat_MATERIEL", Expense.Category.MATERIEL),
        ("5", None),
        ("", None),
    ],
)
def test_parse_category(raw, expected):
    assert parse_category(raw) == expected


def test_category_buttons_fit_whatsapp_limit():
    buttons = category_buttons()

    assert len(buttons) == 3
    assert buttons[0]["id"] == "cat_REPAS"
    assert all(len(button["title"]) <= 20 for button in buttons)


@pytest.mark.django_db
def test_full_expense_flow_creates_expense_and_alerts_managers(draft_ready, manager, sender):
    expense = commit_expense(draft_ready, Expense.Category.REPAS, now=NOW, sender=sender)

    assert expense.amount == Decimal("25.50")
    assert expense.photo_url == "whatsapp-media:receipt"
    assert expense.status == Expense.Status.PENDING
    assert conversation.get_state(draft_ready.pk).is_idle
    alert = Notification.objects.get(type=Notification.Type.EXPENSE)
    assert alert.manager == manager
    assert "25.50 EUR" in alert.message
    assert len(sender.to(manager.phone_number)) == 1


@pytest.mark.django_db
def test_duplicate_commit_creates_a_single_expense(draft_ready, sender):
    commit_expense(draft_ready, Expense.Category.REPAS, now=NOW, sender=sender)

    with pytest.raises(ConversationError):
        commit_expense(draft_ready, Expense.Category.REPAS, now=NOW, sender=sender)

    assert Expense.objects.count() == 1


@pytest.mark.django_db
def test_unknown_category_keeps_the_draft(draft_ready, sender):
    with pytest.raises(ValueError, match="Categorie inconnue"):
        commit_expense(draft_ready, "CASINO", now=NOW, sender=sender)

    assert conversation.get_state(draft_ready.pk).state == ConversationState.AWAITING_CATEGORY


@pytest.mark.django_db
def test_bad_amount_keeps_the_amount_step(employee):
    start_expense(employee)
    record_expense_photo(employee, "whatsapp-media:receipt")

    with pytest.raises(ValueError):
        record_expense_amount(employee, "beaucoup")

    assert conversation.get_state(employee.pk).state == ConversationState.AWAITING_AMOUNT


@pytest.mark.django_db
def test_amount_before_photo_is_refused(employee):
    start_expense(employee)

    with pytest.raises(ConversationError):
        record_expense_amount(employee, "12")

    assert conversation.get_state(employee.pk).state == ConversationState.AWAITING_PHOTO


@pytest.mark.django_db
def test_cancel_abandons_the_draft(draft_ready):
    cancel_expense(draft_ready)

    assert conversation.get_state(draft_ready.pk).is_idle
    assert not Expense.objects.exists()


@pytest.mark.django_db
def test_restart_discards_previous_draft(draft_ready):
    start_expense(draft_ready)

    snapshot = conversation.get_state(draft_ready.pk)
    assert snapshot.state == ConversationState.AWAITING_PHOTO
    assert snapshot.scratch == {}


@pytest.mark.django_db
def test_expenses_can_be_disabled_per_tenant(tenant, employee):
    tenant.config = {"enable_expenses": False}
    tenant.save(update_fields=["config"])

    with pytest.raises(ValueError, match="pas activees"):
        start_expense(employee)


@pytest.mark.django_db
def test_approve_pending_expense_notifies_employee(draft_ready, manager, sender):
    expense = commit_expense(draft_ready, Expense.Category.ESSENCE, now=NOW, sender=sender)
    sender.messages.clear()

    approved = approve_expense(expense, reviewer=manager, sender=sender)

    assert approved.status == Expense.Status.APPROVED
    assert approved.reviewed_by == manager
    assert approved.reviewed_at is not None
    assert "approuvee" in sender.to(draft_ready.phone_number)[0].body


@pytest.mark.django_db
def test_only_pending_expenses_can_be_reviewed(draft_ready, sender):
    expense = commit_expense(draft_ready, Expense.Category.HOTEL, now=NOW, sender=sender)
    reject_expense(expense, sender=sender)

    with pytest.raises(ValueError, match="deja ete traitee"):
        approve_expense(expense, sender=sender)

    expense.refresh_from_db()
    assert expense.status == Expense.Status.REJECTED


@pytest.mark.django_db
def test_reviewer_from_another_tenant_is_refused(draft_ready, sender):
    expense = commit_expense(draft_ready, Expense.Category.HOTEL, now=NOW, sender=sender)
    other_tenant = Tenant.objects.create(name="Autre", industry=Tenant.Industry.OFFICE)
    outsider = register_employee(
        tenant=other_tenant, phone_number="+33 7 50 00 00 01", name="Eve", role="MANAGER",
    )

    with pytest.raises(ValueError):
        reject_expense(expense, reviewer=outsider, sender=sender)

    expense.refresh_from_db()
    assert expense.status == Expense.Status.PENDING
