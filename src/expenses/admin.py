"""Admin registration for expense models."""
from django.contrib import admin

from expenses.models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("employee", "tenant", "category", "amount", "status", "date", "reviewed_by")
    list_filter = ("status", "category", "tenant")
    search_fields = ("employee__name", "employee__phone_number")
    readonly_fields = ("id", "created_at", "updated_at", "reviewed_at")
    list_select_related = ("employee", "tenant", "reviewed_by")
