"""Admin registration for leave requests."""
from django.contrib import admin

from leaves.models import LeaveRequest


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ("reference", "employee", "tenant", "start_date", "end_date", "status", "reviewed_by")
    list_filter = ("status", "tenant")
    search_fields = ("reference", "employee__name", "employee__phone_number")
    readonly_fields = ("id", "reference", "created_at", "updated_at", "reviewed_at")
    list_select_related = ("employee", "tenant", "reviewed_by")
