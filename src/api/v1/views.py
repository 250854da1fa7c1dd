"""Staff API views: scan triggers, diagnostics, expense review, notifications.

All endpoints use the project defaults (session authentication, staff
only).
"""
import logging

from django.utils import timezone
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.serializers import (
    EmployeeSerializer,
    ExpenseReviewSerializer,
    ExpenseSerializer,
    IdentifySerializer,
    NotificationSerializer,
    RunScanSerializer,
)
from employees.phones import normalize_phone
from employees.services import resolve_identity
from expenses.models import Expense
from expenses.services import approve_expense, reject_expense
from integrations.services import describe_integrations
from notifications.models import Notification
from notifications.services import mark_as_read, unread_count
from reminders.services import run_ghost_session_scan, run_morning_nudge_scan

logger = logging.getLogger("pointage")


# ---------------------------------------------------------------------------
# Reminder scans
# ---------------------------------------------------------------------------

class _RunScanAPIView(APIView):
    scan = None

    def post(self, request):
        serializer = RunScanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        now = serializer.validated_data.get("now") or timezone.now()

        logger.info("Scan %s triggered by %s", self.scan.__name__, request.user)
        result = type(self).scan(now)
        return Response({
            "name": result.name,
            "scanned": result.scanned,
            "sent": result.sent,
            "notifications": result.notifications,
            "skipped": result.skipped,
            "failures": result.failures,
        })


class RunMorningNudgeAPIView(_RunScanAPIView):
    """POST /api/v1/reminders/morning-nudge/run/"""

    scan = run_morning_nudge_scan


class RunGhostSessionsAPIView(_RunScanAPIView):
    """POST /api/v1/reminders/ghost-sessions/run/"""

    scan = run_ghost_session_scan


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class IdentifyAPIView(APIView):
    """POST /api/v1/debug/identify/  Resolve a phone number like the webhook does."""

    def post(self, request):
        serializer = IdentifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        raw = serializer.validated_data["phone"]

        employee = resolve_identity(raw)
        return Response({
            "input": raw,
            "normalized": normalize_phone(raw),
            "found": employee is not None,
            "employee": EmployeeSerializer(employee).data if employee else None,
        })


class IntegrationStatusAPIView(APIView):
    """GET /api/v1/integrations/  Masked status of stored provider secrets."""

    def get(self, request):
        return Response(describe_integrations())


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

class ExpenseViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ExpenseSerializer

    def get_queryset(self):
        qs = Expense.objects.select_related("employee", "tenant", "reviewed_by")
        for param in ("tenant", "status", "employee"):
            value = self.request.query_params.get(param)
            if value:
                qs = qs.filter(**{param: value})
        return qs

    def _review(self, request, review):
        expense = self.get_object()
        serializer = ExpenseReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            expense = review(expense, reviewer=serializer.validated_data.get("reviewer"))
        except ValueError as exc:
            raise ValidationError({"detail": str(exc)})
        return Response(self.get_serializer(expense).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        return self._review(request, approve_expense)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        return self._review(request, reject_expense)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = NotificationSerializer

    def get_queryset(self):
        qs = Notification.objects.select_related("employee")
        manager = self.request.query_params.get("manager")
        if manager:
            qs = qs.filter(manager_id=manager)
        if self.request.query_params.get("unread") == "1":
            qs = qs.filter(is_read=False)
        return qs

    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        notification = mark_as_read(self.get_object())
        return Response({
            **self.get_serializer(notification).data,
            "unread_count": unread_count(notification.manager),
        })
