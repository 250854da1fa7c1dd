"""Main API URL router for /api/v1/."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views
from bot.views import WhatsAppWebhookView

router = DefaultRouter()
router.register(r"expenses", v1_views.ExpenseViewSet, basename="expense")
router.register(r"notifications", v1_views.NotificationViewSet, basename="notification")


app_name = "api"
urlpatterns = [
    path("", include(router.urls)),

    # WhatsApp
    path("webhook/", WhatsAppWebhookView.as_view(), name="whatsapp-webhook"),

    # Reminder scans
    path("reminders/morning-nudge/run/", v1_views.RunMorningNudgeAPIView.as_view(), name="reminders-morning-nudge"),
    path("reminders/ghost-sessions/run/", v1_views.RunGhostSessionsAPIView.as_view(), name="reminders-ghost-sessions"),

    # Diagnostics
    path("debug/identify/", v1_views.IdentifyAPIView.as_view(), name="debug-identify"),
    path("integrations/", v1_views.IntegrationStatusAPIView.as_view(), name="integrations-status"),
]
