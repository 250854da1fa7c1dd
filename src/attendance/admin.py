"""Admin configuration for the attendance app."""
from django.contrib import admin

from attendance.models import Attendance


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    """Admin for the Attendance model."""

    list_display = (
        "employee",
        "tenant",
        "site",
        "check_in",
        "check_out",
        "distance_from_site",
        "last_reminder_sent_at",
    )
    list_filter = ("tenant", "site")
    search_fields = ("employee__name", "employee__phone_number")
    date_hierarchy = "check_in"
    list_select_related = ("employee", "tenant", "site")
    readonly_fields = ("id", "created_at", "updated_at", "last_reminder_sent_at")
