from django.contrib import admin

from bot.models import ProcessedMessage


@admin.register(ProcessedMessage)
class ProcessedMessageAdmin(admin.ModelAdmin):
    list_display = ("message_id", "phone_number", "message_type", "created_at")
    list_filter = ("message_type",)
    search_fields = ("message_id", "phone_number")
    readonly_fields = ("id", "message_id", "phone_number", "message_type", "created_at", "updated_at")
