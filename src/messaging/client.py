"""Outbound WhatsApp Cloud API client.

Every send returns ``True`` on a 2xx answer and ``False`` otherwise; network
errors and API errors are logged, never raised, so a scan or a webhook
handler is not interrupted by a delivery problem.
"""
from __future__ import annotations

import logging

import requests
from django.conf import settings

logger = logging.getLogger("pointage")

MAX_BUTTONS = 3
MAX_BUTTON_TITLE = 20


class WhatsAppClient:
    """Thin wrapper over ``POST /{phone_id}/messages``."""

    def __init__(self, token, phone_id, *, api_url=None, api_version=None, timeout=None, session=None):
        self.token = token
        self.phone_id = phone_id
        self.api_url = (api_url or settings.WHATSAPP_API_URL).rstrip("/")
        self.api_version = api_version or settings.WHATSAPP_API_VERSION
        self.timeout = timeout or settings.WHATSAPP_TIMEOUT
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.phone_id)

    @property
    def messages_url(self) -> str:
        return f"{self.api_url}/{self.api_version}/{self.phone_id}/messages"

    def send_text(self, to: str, body: str) -> bool:
        return self._post(to, {"type": "text", "text": {"body": body}})

    def send_buttons(self, to: str, body: str, buttons) -> bool:
        """Send a message with up to three quick-reply buttons.

        *buttons* is a sequence of ``{"id": ..., "title": ...}``; the id is
        echoed back by WhatsApp when the employee taps the button.
        """
        replies = [
            {"type": "reply", "reply": {"id": b["id"], "title": b["title"][:MAX_BUTTON_TITLE]}}
            for b in list(buttons)[:MAX_BUTTONS]
        ]
        return self._post(to, {
            "type": "interactive",
            "interactive": {
                "type": "button",
                "body": {"text": body},
                "action": {"buttons": replies},
            },
        })

    def _post(self, to, payload) -> bool:
        if not self.is_configured:
            logger.error("WhatsApp client is not configured (token or phone id missing)")
            return False

        data = {"messaging_product": "whatsapp", "to": to, **payload}
        try:
            response = self.session.post(
                self.messages_url,
                json=data,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error(
                "WhatsApp API rejected message to %s: %s %s",
                to, exc.response.status_code, exc.response.text[:500],
            )
            return False
        except requests.RequestException as exc:
            logger.error("WhatsApp API unreachable while sending to %s: %s", to, exc)
            return False

        logger.debug("WhatsApp message (%s) sent to %s", payload["type"], to)
        return True


def get_sender() -> WhatsAppClient:
    """Client built from the integration vault, falling back to settings."""
    from integrations.models import Integration
    from integrations.services import get_provider_config

    config = get_provider_config(Integration.Provider.WHATSAPP)
    return WhatsAppClient(
        token=config.get("TOKEN", ""),
        phone_id=config.get("PHONE_ID", ""),
    )
