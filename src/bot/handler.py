"""Bot logic: turn one inbound WhatsApp message into state changes and a reply.

Routing order for an identified employee:

1. location messages attach a position to today's session;
2. images feed the expense flow when it waits for a receipt, otherwise
   they attach a photo to today's session;
3. text is checked for a leave request (``Conge 25/12``) and, from a
   manager, for a decision on one (``OK 3f2a9c1e``);
4. text and button replies are then read against the current
   conversation state (amount, category, cancel), then as commands.

The dedup record and every state change made for a message commit
together; the reply is sent once they are committed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction
from django.utils import timezone

from attendance import services as attendance_services
from attendance.services import AttendanceError
from bot.models import ProcessedMessage
from bot.webhook import InboundMessage
from employees.conversation import ConversationError
from employees.models import ConversationState, Employee
from employees.services import resolve_identity
from expenses import services as expense_services
from leaves import services as leave_services

logger = logging.getLogger("pointage")

CHECK_IN_COMMANDS = {"hi", "bonjour", "salut", "hello", "start"}
CHECK_OUT_COMMANDS = {"bye", "au revoir", "stop", "fin", "ciao"}
HELP_COMMANDS = {"help", "aide", "?"}
EXPENSE_COMMANDS = {"frais", "note de frais", "depense", "dépense"}
CANCEL_COMMANDS = {"annuler", "cancel"}
GLOBAL_COMMANDS = CHECK_IN_COMMANDS | CHECK_OUT_COMMANDS | HELP_COMMANDS | EXPENSE_COMMANDS

BUTTON_COMMANDS = {
    "cmd_hi": "hi",
    "cmd_bye": "bye",
    "cmd_cancel": "annuler",
}

UNKNOWN_NUMBER_REPLY = "❌ Numero non reconnu. Contactez votre RH."


@dataclass
class Reply:
    text: str
    buttons: list[dict] = field(default_factory=list)


def _resolve_sender(sender):
    if sender is not None:
        return sender
    from messaging.client import get_sender
    return get_sender()


def mark_processed(message: InboundMessage) -> bool:
    """Record *message* as handled; ``False`` if it was already recorded."""
    try:
        with transaction.atomic():
            ProcessedMessage.objects.create(
                message_id=message.message_id,
                phone_number=message.sender[:20],
                message_type=message.type,
            )
    except IntegrityError:
        return False
    return True


def event_time(message: InboundMessage, now):
    """Time the employee wrote the message; never in the future."""
    if message.timestamp is None or message.timestamp > now:
        return now
    return message.timestamp


# ==================================================================
# Replies
# ==================================================================

def help_text(employee: Employee) -> str:
    tenant = employee.tenant
    lines = [
        "\U0001f4cb *Commandes disponibles :*",
        "",
        f"• *Hi/Bonjour* → {tenant.text('action_in')}",
        f"• *Bye/Au revoir* → {tenant.text('action_out')}",
    ]
    if tenant.is_feature_enabled("enable_expenses"):
        lines.append("• *Frais* → Declarer une note de frais")
    if tenant.is_feature_enabled("enable_leave_requests"):
        lines.append("• *Conge JJ/MM* → Demander un jour de conge")
        if employee.is_manager:
            lines.append("• *OK id* / *NON id* → Approuver ou refuser une demande de conge")
    if tenant.is_feature_enabled("enable_gps"):
        lines.append("• \U0001f4cd Partager votre position → Valider votre presence")
    lines += [
        "• *Help* → Afficher cette aide",
        "",
        f"Vous etes connecte en tant que *{employee.name or employee.phone_number}* "
        f"({employee.get_role_display()}) chez *{tenant.name}*.",
    ]
    return "\n".join(lines)


def unknown_command_text(body: str) -> str:
    return (
        f"\U0001f914 Je ne comprends pas \"{body}\".\n\n"
        "Dites *\"Hi\"* pour pointer votre arrivee, *\"Bye\"* pour pointer votre depart.\n"
        "Tapez *\"Help\"* pour plus d'informations."
    )


def _amount_prompt() -> Reply:
    return Reply("\U0001f4f7 Photo recue ! ✅\n\n\U0001f4b0 Quel est le montant de la depense ?\n(Ex : 25.50)")


def _category_prompt(amount) -> Reply:
    return Reply(
        f"\U0001f4b0 Montant : *{amount} €*\n\n\U0001f4c2 Choisissez la categorie "
        "(1 Repas, 2 Essence, 3 Hotel, 4 Materiel) :",
        buttons=expense_services.category_buttons(),
    )


# ==================================================================
# Handlers
# ==================================================================

def _handle_check_in(employee, at) -> Reply:
    attendance_services.check_in(employee, at=at)
    local = employee.tenant.localtime(at)
    return Reply(
        f"✅ {employee.tenant.text('action_in')} enregistree a {local:%H:%M}. "
        f"{employee.tenant.text('greeting')} Bon travail {employee.first_name} !"
    )


def _handle_check_out(employee, at) -> Reply:
    attendance, worked = attendance_services.check_out(employee, at=at)
    local = employee.tenant.localtime(attendance.check_out)
    return Reply(
        f"\U0001f44b {employee.tenant.text('action_out')} enregistree a {local:%H:%M}. "
        f"Duree de travail : {worked}. {employee.tenant.text('goodbye')}"
    )


def _handle_location(employee, message, now, sender) -> Reply:
    if not message.has_location:
        return Reply("⚠️ Position illisible. Reessayez depuis le bouton de partage de position.")
    check = attendance_services.attach_location(
        employee, message.latitude, message.longitude, now=now, sender=sender,
    )
    if check.distance is None:
        return Reply("\U0001f4cd Position enregistree (site non configure pour la validation GPS).")
    if check.in_range:
        return Reply(f"\U0001f4cd Position recue ! Vous etes *sur site* ({check.distance}m du point de reference).")
    return Reply(f"⚠️ Attention ! Vous etes *hors zone* ({check.distance}m). Ce pointage sera signale.")


def _handle_image(employee, message, state, now) -> Reply:
    if not message.media_ref:
        return Reply("❌ Erreur lors du traitement de la photo. Reessayez.")
    if state == ConversationState.AWAITING_PHOTO:
        expense_services.record_expense_photo(employee, message.media_ref)
        return _amount_prompt()
    if not employee.tenant.is_feature_enabled("enable_photos"):
        return Reply("Les photos de pointage ne sont pas activees pour votre entreprise.")
    attendance_services.attach_photo(employee, message.media_ref, now=now)
    return Reply("\U0001f4f7 Photo bien recue et ajoutee a ton dossier ! ✅")


def _handle_leave_request(employee, command, now, sender) -> Reply:
    leave = leave_services.request_leave(
        employee, command.date_text, reason=command.reason, now=now, sender=sender,
    )
    return Reply(
        f"✅ Demande de conge envoyee au manager pour le {leave.start_date:%d/%m/%Y}.\n\n"
        "Vous recevrez une notification des qu'elle sera traitee."
    )


def _handle_leave_response(manager, response, now, sender) -> Reply:
    leave = leave_services.respond_to_leave(manager, response, now=now, sender=sender)
    verdict = "approuvee ✅" if response.approve else "refusee ❌"
    return Reply(f"✅ Demande #{leave.reference} {verdict}.")


def _handle_conversation_step(employee, state, command, body, now, sender) -> Reply | None:
    """Reply for a message consumed by the current conversation step, else ``None``."""
    if command in GLOBAL_COMMANDS:
        return None
    if command in CANCEL_COMMANDS:
        expense_services.cancel_expense(employee)
        return Reply("\U0001f6ab Note de frais annulee.")

    if state == ConversationState.AWAITING_AMOUNT:
        amount = expense_services.record_expense_amount(employee, body)
        return _category_prompt(amount)

    if state == ConversationState.AWAITING_CATEGORY:
        category = expense_services.parse_category(command)
        if category is None:
            return Reply("❓ Categorie inconnue. Repondez 1 (Repas), 2 (Essence), 3 (Hotel) ou 4 (Materiel).")
        expense = expense_services.commit_expense(employee, category, now=now, sender=sender)
        return Reply(
            f"✅ Note de frais enregistree !\n\n\U0001f4c2 {expense.get_category_display()}\n"
            f"\U0001f4b0 {expense.amount} €\n\nEn attente de validation par votre manager."
        )

    if state == ConversationState.AWAITING_PHOTO:
        return Reply("\U0001f4f7 Envoyez une photo du justificatif de votre depense (ou *annuler*).")
    return None


def _handle_text(employee, message, state, now, at, sender) -> Reply:
    body = (message.text or "").strip()
    command = BUTTON_COMMANDS.get(message.button_id, message.button_id or body).lower().strip()

    leave_command = leave_services.parse_leave_command(body)
    if leave_command is not None:
        return _handle_leave_request(employee, leave_command, now, sender)
    if employee.is_manager:
        response = leave_services.parse_manager_response(body)
        if response is not None:
            return _handle_leave_response(employee, response, now, sender)

    if state is not None:
        reply = _handle_conversation_step(employee, state, command, body, now, sender)
        if reply is not None:
            return reply

    if command in CHECK_IN_COMMANDS:
        return _handle_check_in(employee, at)
    if command in CHECK_OUT_COMMANDS:
        return _handle_check_out(employee, at)
    if command in HELP_COMMANDS:
        return Reply(help_text(employee))
    if command in EXPENSE_COMMANDS:
        expense_services.start_expense(employee)
        return Reply("\U0001f4f7 Envoyez une photo du justificatif de votre depense.")
    return Reply(unknown_command_text(body))


def build_reply(employee: Employee, message: InboundMessage, *, now, sender) -> Reply:
    at = event_time(message, now)
    state = employee.conversation_state
    try:
        if message.type == "location":
            return _handle_location(employee, message, at, sender)
        if message.type in ("image", "document"):
            return _handle_image(employee, message, state, at)
        if message.type in ("text", "interactive", "button"):
            return _handle_text(employee, message, state, now, at, sender)
    except (AttendanceError, ConversationError, ValueError) as exc:
        logger.info("Bot refused %s from employee %s: %s", message.type, employee.pk, exc)
        return Reply(f"⚠️ {exc}")
    return Reply("Type de message non pris en charge. Tapez *Help* pour l'aide.")


def handle_message(message: InboundMessage, *, sender=None, now=None) -> Reply | None:
    """Process one inbound message and send the reply.

    Returns the reply sent, or ``None`` for a duplicate delivery.  An
    unexpected error rolls the dedup record back with the rest, so the
    provider retry is processed again.
    """
    now = now or timezone.now()
    sender = _resolve_sender(sender)
    with transaction.atomic():
        if not mark_processed(message):
            logger.info("Duplicate delivery of message %s ignored", message.message_id)
            return None

        employee = resolve_identity(message.sender)
        if employee is None:
            logger.info("Message %s from unknown number", message.message_id)
            reply = Reply(UNKNOWN_NUMBER_REPLY)
        else:
            logger.info("Received %s message from employee %s", message.type, employee.pk)
            reply = build_reply(employee, message, now=now, sender=sender)

    if reply.buttons:
        sender.send_buttons(message.sender, reply.text, reply.buttons)
    else:
        sender.send_text(message.sender, reply.text)
    return reply
