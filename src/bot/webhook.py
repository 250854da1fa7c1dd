"""Parsing of WhatsApp Cloud API webhook payloads."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

logger = logging.getLogger("pointage")

WHATSAPP_OBJECT = "whatsapp_business_account"
MEDIA_REF_PREFIX = "whatsapp-media:"


@dataclass(frozen=True)
class InboundMessage:
    """One inbound message, flattened from the nested webhook payload."""

    message_id: str
    sender: str
    type: str
    text: str = ""
    button_id: str | None = None
    media_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timestamp: datetime | None = None
    phone_number_id: str | None = None

    @property
    def media_ref(self) -> str | None:
        if not self.media_id:
            return None
        return f"{MEDIA_REF_PREFIX}{self.media_id}"

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _parse_timestamp(raw) -> datetime | None:
    try:
        return datetime.fromtimestamp(int(raw), tz=dt_timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _parse_message(message: dict, phone_number_id) -> InboundMessage | None:
    message_id = message.get("id")
    sender = message.get("from")
    if not message_id or not sender:
        logger.warning("Webhook message without id or sender ignored")
        return None

    message_type = message.get("type", "")
    fields = {
        "message_id": message_id,
        "sender": sender,
        "type": message_type,
        "timestamp": _parse_timestamp(message.get("timestamp")),
        "phone_number_id": phone_number_id,
    }

    if message_type == "text":
        fields["text"] = (message.get("text") or {}).get("body", "")
    elif message_type == "interactive":
        interactive = message.get("interactive") or {}
        reply = interactive.get("button_reply") or interactive.get("list_reply") or {}
        fields["button_id"] = reply.get("id")
        fields["text"] = reply.get("title", "")
    elif message_type == "button":
        button = message.get("button") or {}
        fields["button_id"] = button.get("payload")
        fields["text"] = button.get("text", "")
    elif message_type in ("image", "document"):
        media = message.get(message_type) or {}
        fields["media_id"] = media.get("id")
        fields["text"] = media.get("caption", "")
    elif message_type == "location":
        location = message.get("location") or {}
        try:
            fields["latitude"] = float(location["latitude"])
            fields["longitude"] = float(location["longitude"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Location message %s without usable coordinates", message_id)

    return InboundMessage(**fields)


def parse_webhook(payload: dict) -> list[InboundMessage]:
    """Extract every message of a webhook POST body.

    Status callbacks (sent, delivered, read) carry no message and are
    skipped.

    Raises
    ------
    ValueError
        If the payload is not a WhatsApp Business event.
    """
    if not isinstance(payload, dict) or payload.get("object") != WHATSAPP_OBJECT:
        raise ValueError("Not a WhatsApp Business webhook payload.")

    messages = []
    for entry in payload.get("entry") or []:
        for change in entry.get("changes") or []:
            value = change.get("value") or {}
            phone_number_id = (value.get("metadata") or {}).get("phone_number_id")
            for raw in value.get("messages") or []:
                parsed = _parse_message(raw, phone_number_id)
                if parsed is not None:
                    messages.append(parsed)
            for status in value.get("statuses") or []:
                logger.debug(
                    "Status update for %s: %s", status.get("recipient_id"), status.get("status"),
                )
    return messages
