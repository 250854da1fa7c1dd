"""Per-employee conversation state store.

The bot keeps one dialogue position per employee (``conversation_state``)
plus a scratch payload (``temp_expense_data``) accumulated across turns.
WhatsApp delivers webhooks at least once and in no guaranteed order, so
every mutation here:

* runs in its own transaction with ``select_for_update()`` on the
  employee row, serialising concurrent deliveries for the same employee;
* re-reads the scratch payload under that lock and patches it, instead
  of writing back a stale copy loaded earlier by the caller;
* saves only the conversation fields.

Scratch payloads are typed per state (see :class:`ExpenseDraft` and its
subclasses): a state can only be entered when the data collected by the
previous steps is present.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.db import transaction

from employees.models import ConversationState, Employee

logger = logging.getLogger("pointage")

CONVERSATION_FIELDS = ["conversation_state", "temp_expense_data", "updated_at"]


class ConversationError(ValueError):
    """A conversation step was attempted without the data it requires.

    The stored state is left untouched so the employee can retry.
    """


# ---------------------------------------------------------------------------
# Typed scratch payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExpenseDraft:
    """Scratch payload of an expense being built turn by turn."""

    state = None
    required = ()

    @classmethod
    def from_scratch(cls, scratch: dict):
        missing = [key for key in cls.required if scratch.get(key) in (None, "")]
        if missing:
            raise ConversationError(
                f"Donnees manquantes pour l'etape '{cls.state}' : {', '.join(missing)}."
            )
        return cls(**{key: scratch[key] for key in cls.required})


@dataclass(frozen=True)
class AwaitingPhoto(ExpenseDraft):
    state = ConversationState.AWAITING_PHOTO


@dataclass(frozen=True)
class AwaitingAmount(ExpenseDraft):
    state = ConversationState.AWAITING_AMOUNT
    required = ("photo_url",)

    photo_url: str


@dataclass(frozen=True)
class AwaitingCategory(ExpenseDraft):
    state = ConversationState.AWAITING_CATEGORY
    required = ("photo_url", "amount")

    photo_url: str
    amount: str

    @property
    def amount_decimal(self) -> Decimal:
        try:
            return Decimal(str(self.amount))
        except InvalidOperation:
            raise ConversationError("Montant enregistre invalide.")


DRAFT_BY_STATE = {
    ConversationState.AWAITING_PHOTO.value: AwaitingPhoto,
    ConversationState.AWAITING_AMOUNT.value: AwaitingAmount,
    ConversationState.AWAITING_CATEGORY.value: AwaitingCategory,
}


def load_draft(state, scratch):
    """Return the typed draft for *state*, or ``None`` when idle."""
    if state is None:
        return None
    try:
        draft_class = DRAFT_BY_STATE[str(state)]
    except KeyError:
        raise ConversationError(f"Etat de conversation inconnu : {state}.")
    return draft_class.from_scratch(scratch or {})


@dataclass(frozen=True)
class ConversationSnapshot:
    state: str | None
    scratch: dict

    @property
    def is_idle(self) -> bool:
        return self.state is None

    @property
    def draft(self):
        return load_draft(self.state, self.scratch)


# ---------------------------------------------------------------------------
# Store operations
# ---------------------------------------------------------------------------

def _lock(employee_id) -> Employee:
    return Employee.objects.select_for_update().get(pk=employee_id)


def _save(employee: Employee, state, scratch):
    employee.conversation_state = state
    employee.temp_expense_data = scratch
    employee.save(update_fields=CONVERSATION_FIELDS)


def get_state(employee_id) -> ConversationSnapshot:
    employee = Employee.objects.only(*CONVERSATION_FIELDS[:2]).get(pk=employee_id)
    return ConversationSnapshot(
        state=employee.conversation_state,
        scratch=dict(employee.temp_expense_data or {}),
    )


@transaction.atomic
def set_state(employee_id, state, data: dict | None = None) -> ConversationSnapshot:
    """Move the employee to *state*.

    ``data`` replaces the scratch payload when given; otherwise the
    current payload is kept.  ``state=None`` is equivalent to
    :func:`clear`.

    Raises
    ------
    ConversationError
        If the resulting scratch payload lacks what *state* requires.
    """
    employee = _lock(employee_id)
    if state is None:
        _save(employee, None, None)
        return ConversationSnapshot(state=None, scratch={})

    scratch = dict(data) if data is not None else dict(employee.temp_expense_data or {})
    load_draft(state, scratch)
    _save(employee, state, scratch)
    logger.debug("Conversation of %s moved to %s", employee_id, state)
    return ConversationSnapshot(state=state, scratch=scratch)


@transaction.atomic
def update_scratch(employee_id, partial: dict) -> dict:
    """Shallow-merge *partial* into the scratch payload and return the result."""
    employee = _lock(employee_id)
    scratch = {**(employee.temp_expense_data or {}), **partial}
    _save(employee, employee.conversation_state, scratch)
    return scratch


@transaction.atomic
def advance(employee_id, *, expected, to, partial: dict | None = None) -> ConversationSnapshot:
    """Patch the scratch payload and move from *expected* to *to* atomically.

    Raises
    ------
    ConversationError
        If the employee is not in *expected* state, or the merged payload
        lacks what *to* requires.  Nothing is written in that case.
    """
    employee = _lock(employee_id)
    if employee.conversation_state != expected:
        raise ConversationError(
            f"Etape inattendue (etat actuel : {employee.conversation_state or 'aucun'})."
        )
    scratch = {**(employee.temp_expense_data or {}), **(partial or {})}
    load_draft(to, scratch)
    _save(employee, to, scratch)
    return ConversationSnapshot(state=to, scratch=scratch)


@transaction.atomic
def clear(employee_id) -> None:
    """Return the employee to idle and discard the scratch payload."""
    employee = _lock(employee_id)
    _save(employee, None, None)
