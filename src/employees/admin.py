"""Admin configuration for the employees app."""
from django.contrib import admin

from employees.models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    """Admin for the Employee model."""

    list_display = (
        "name",
        "phone_number",
        "tenant",
        "role",
        "site",
        "conversation_state",
        "is_active",
    )
    list_filter = ("role", "is_active", "conversation_state", "tenant")
    search_fields = ("name", "phone_number")
    readonly_fields = ("id", "created_at", "updated_at", "last_nudge_sent_at")
    list_select_related = ("tenant", "site")
    actions = ("reset_conversation",)

    fieldsets = (
        (None, {
            "fields": (
                "id",
                "tenant",
                "site",
                "name",
                "phone_number",
                "role",
                "is_active",
            ),
        }),
        ("Conversation", {
            "fields": (
                "conversation_state",
                "temp_expense_data",
                "last_nudge_sent_at",
            ),
        }),
        ("Dates", {
            "fields": (
                "created_at",
                "updated_at",
            ),
        }),
    )

    @admin.action(description="Reinitialiser la conversation")
    def reset_conversation(self, request, queryset):
        queryset.update(conversation_state=None, temp_expense_data=None)
