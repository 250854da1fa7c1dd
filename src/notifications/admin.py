"""Admin configuration for the notifications app."""
from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "manager", "employee", "tenant", "is_read", "created_at")
    list_filter = ("type", "is_read", "tenant")
    search_fields = ("title", "message", "manager__name", "employee__name")
    list_select_related = ("manager", "employee", "tenant")
    readonly_fields = ("id", "created_at", "updated_at", "read_at")
