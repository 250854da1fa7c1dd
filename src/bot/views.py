"""WhatsApp Cloud API webhook endpoint."""
import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from bot.handler import handle_message
from bot.webhook import parse_webhook
from integrations.models import Integration
from integrations.services import get_config_value

logger = logging.getLogger("pointage")


class WhatsAppWebhookView(APIView):
    """
    GET  /api/v1/webhook/  Meta verification handshake.
    POST /api/v1/webhook/  Event delivery.

    Handled payloads always get a 200 so that Meta does not redeliver them;
    a failure on one message is logged and does not affect the others.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = []

    def get(self, request):
        mode = request.query_params.get("hub.mode")
        token = request.query_params.get("hub.verify_token")
        challenge = request.query_params.get("hub.challenge", "")

        if not mode or not token:
            return HttpResponse(status=status.HTTP_400_BAD_REQUEST)

        expected = get_config_value(Integration.Provider.WHATSAPP, "VERIFY_TOKEN")
        if mode == "subscribe" and expected and token == expected:
            logger.info("Webhook verified")
            return HttpResponse(challenge, content_type="text/plain")

        logger.warning("Webhook verification failed: invalid token")
        return HttpResponse(status=status.HTTP_403_FORBIDDEN)

    def post(self, request):
        try:
            messages = parse_webhook(request.data)
        except ValueError:
            return Response(status=status.HTTP_404_NOT_FOUND)

        for message in messages:
            try:
                handle_message(message)
            except Exception:
                logger.exception("Failed to handle WhatsApp message %s", message.message_id)
        return Response(status=status.HTTP_200_OK)
