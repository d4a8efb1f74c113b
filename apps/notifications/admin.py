"""Admin registration for notifications."""

from __future__ import annotations

from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "title", "event_type", "is_read", "delivery_status", "delivery_attempts", "created_at")
    list_filter = ("event_type", "is_read", "delivery_status")
    search_fields = ("user__email", "title", "message")
    readonly_fields = ("created_at", "dispatched_at", "last_error")
