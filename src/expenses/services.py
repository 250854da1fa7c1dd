"""Expense conversation steps and manager review.

The bot drives an expense through the conversation states of
:mod:`employees.conversation`: idle -> awaiting_photo -> awaiting_amount ->
awaiting_category -> committed.  Each step is guarded by the state it
expects, so a duplicated or out-of-order webhook cannot skip a step nor
create the same expense twice.
"""
from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from employees import conversation
from employees.conversation import AwaitingCategory, ConversationError
from employees.models import ConversationState, Employee
from expenses.models import Expense

logger = logging.getLogger("pointage")

MAX_AMOUNT = Decimal("99999999.99")

CATEGORY_ALIASES = {
    "1": Expense.Category.REPAS,
    "REPAS": Expense.Category.REPAS,
    "RESTAURANT": Expense.Category.REPAS,
    "2": Expense.Category.ESSENCE,
    "ESSENCE": Expense.Category.ESSENCE,
    "CARBURANT": Expense.Category.ESSENCE,
    "3": Expense.Category.HOTEL,
    "HOTEL": Expense.Category.HOTEL,
    "HÔTEL": Expense.Category.HOTEL,
    "4": Expense.Category.MATERIEL,
    "MATERIEL": Expense.Category.MATERIEL,
    "MATÉRIEL": Expense.Category.MATERIEL,
}

CATEGORY_BUTTON_PREFIX = "cat_"


def parse_amount(raw) -> Decimal:
    """Parse ``"25.50"``, ``"25,50 €"`` or ``"1 200"`` into a positive Decimal.

    Raises
    ------
    ValueError
        If the text is not a positive amount.
    """
    text = re.sub(r"[€\s]|eur(os?)?", "", str(raw or "").strip().lower())
    text = text.replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError("Montant invalide. Exemple : 25.50")
    if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
        raise ValueError("Le montant doit etre strictement superieur a 0.")
    return amount.quantize(Decimal("0.01"))


def parse_category(raw) -> str | None:
    text = str(raw or "").strip()
    if text.startswith(CATEGORY_BUTTON_PREFIX):
        text = text[len(CATEGORY_BUTTON_PREFIX):]
    return CATEGORY_ALIASES.get(text.upper())


def category_buttons() -> list[dict]:
    """Quick-reply buttons for the category step (WhatsApp allows three)."""
    return [
        {"id": f"{CATEGORY_BUTTON_PREFIX}{value}", "title": label}
        for value, label in Expense.Category.choices[:3]
    ]


# ==================================================================
# Conversation steps
# ==================================================================

def start_expense(employee: Employee):
    """Enter the expense flow, discarding any draft in progress.

    Raises
    ------
    ValueError
        If expenses are disabled for the employee's tenant.
    """
    if not employee.tenant.is_feature_enabled("enable_expenses"):
        raise ValueError("Les notes de frais ne sont pas activees pour votre entreprise.")
    return conversation.set_state(employee.pk, ConversationState.AWAITING_PHOTO, data={})


def record_expense_photo(employee: Employee, photo_url: str):
    return conversation.advance(
        employee.pk,
        expected=ConversationState.AWAITING_PHOTO,
        to=ConversationState.AWAITING_AMOUNT,
        partial={"photo_url": photo_url},
    )


def record_expense_amount(employee: Employee, raw_amount) -> Decimal:
    """Store the amount and move to the category step.

    Raises
    ------
    ValueError
        If the amount cannot be parsed; the state is unchanged.
    """
    amount = parse_amount(raw_amount)
    conversation.advance(
        employee.pk,
        expected=ConversationState.AWAITING_AMOUNT,
        to=ConversationState.AWAITING_CATEGORY,
        partial={"amount": str(amount)},
    )
    return amount


def commit_expense(employee: Employee, category, *, now=None, sender=None) -> Expense:
    """Create the expense from the draft and return the employee to idle.

    Managers of the tenant receive an ``EXPENSE`` notification once the
    expense is stored.

    Raises
    ------
    ConversationError
        If the employee is not at the category step or the draft is
        incomplete; the state is left untouched.
    ValueError
        If *category* is unknown.
    """
    from notifications.models import Notification
    from notifications.services import notify_all

    now = now or timezone.now()
    if category not in Expense.Category.values:
        raise ValueError("Categorie inconnue.")

    with transaction.atomic():
        locked = Employee.objects.select_for_update().get(pk=employee.pk)
        if locked.conversation_state != ConversationState.AWAITING_CATEGORY:
            raise ConversationError("Aucune note de frais en attente de categorie.")
        draft = AwaitingCategory.from_scratch(locked.temp_expense_data or {})
        expense = Expense.objects.create(
            employee=employee,
            tenant=employee.tenant,
            amount=draft.amount_decimal,
            category=category,
            photo_url=draft.photo_url,
            date=now,
        )
        conversation.clear(employee.pk)

    logger.info("Expense %s created for employee %s", expense.pk, employee.pk)
    notify_all(
        employee.tenant,
        type=Notification.Type.EXPENSE,
        title="Nouvelle note de frais",
        message=(
            f"{employee.name or employee.phone_number} a soumis une note de frais : "
            f"{expense.get_category_display()} {expense.amount} EUR."
        ),
        employee=employee,
        now=now,
        sender=sender,
    )
    return expense


def cancel_expense(employee: Employee) -> None:
    conversation.clear(employee.pk)


# ==================================================================
# Manager review
# ==================================================================

def _review(expense: Expense, status, reviewer, sender) -> Expense:
    with transaction.atomic():
        locked = Expense.objects.select_for_update().select_related("employee").get(pk=expense.pk)
        if locked.status != Expense.Status.PENDING:
            raise ValueError("Cette note de frais a deja ete traitee.")
        if reviewer is not None and reviewer.tenant_id != locked.tenant_id:
            raise ValueError("Note de frais non trouvee.")
        locked.status = status
        locked.reviewed_by = reviewer
        locked.reviewed_at = timezone.now()
        locked.save(update_fields=["status", "reviewed_by", "reviewed_at", "updated_at"])

    logger.info("Expense %s %s", locked.pk, status)

    if sender is None:
        from messaging.client import get_sender
        sender = get_sender()
    verdict = "approuvee ✅" if status == Expense.Status.APPROVED else "refusee ❌"
    sender.send_text(
        locked.employee.phone_number,
        f"Votre note de frais {locked.get_category_display()} de {locked.amount} EUR a ete {verdict}.",
    )
    return locked


def approve_expense(expense: Expense, *, reviewer=None, sender=None) -> Expense:
    """Approve a ``PENDING`` expense and tell the employee."""
    return _review(expense, Expense.Status.APPROVED, reviewer, sender)


def reject_expense(expense: Expense, *, reviewer=None, sender=None) -> Expense:
    """Reject a ``PENDING`` expense and tell the employee."""
    return _review(expense, Expense.Status.REJECTED, reviewer, sender)
