"""Serializers for the staff API."""
from __future__ import annotations

from rest_framework import serializers

from employees.models import Employee
from expenses.models import Expense
from notifications.models import Notification


class EmployeeSerializer(serializers.ModelSerializer):
    tenant_name = serializers.CharField(source="tenant.name", read_only=True)
    site_name = serializers.CharField(source="site.name", read_only=True, default=None)

    class Meta:
        model = Employee
        fields = [
            "id",
            "name",
            "phone_number",
            "role",
            "tenant",
            "tenant_name",
            "site",
            "site_name",
            "conversation_state",
            "is_active",
        ]
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)
    category_label = serializers.CharField(source="get_category_display", read_only=True)

    class Meta:
        model = Expense
        fields = [
            "id",
            "employee",
            "employee_name",
            "tenant",
            "amount",
            "category",
            "category_label",
            "photo_url",
            "status",
            "date",
            "reviewed_by",
            "reviewed_at",
        ]
        read_only_fields = fields


class ExpenseReviewSerializer(serializers.Serializer):
    reviewer = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.managers(),
        required=False,
        allow_null=True,
    )


class NotificationSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True, default=None)

    class Meta:
        model = Notification
        fields = [
            "id",
            "manager",
            "tenant",
            "type",
            "title",
            "message",
            "employee",
            "employee_name",
            "is_read",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields


class RunScanSerializer(serializers.Serializer):
    now = serializers.DateTimeField(required=False)


class IdentifySerializer(serializers.Serializer):
    phone = serializers.CharField(max_length=40)
