"""Admin registration for blocked ranges."""

from __future__ import annotations

from django.contrib import admin

from .models import BlockedRange


@admin.register(BlockedRange)
class BlockedRangeAdmin(admin.ModelAdmin):
    list_display = ("horse", "start_date", "end_date", "reason", "owner", "created_at")
    list_filter = ("start_date",)
    search_fields = ("horse__name", "reason", "owner__email")
    readonly_fields = ("id", "created_at")
    raw_id_fields = ("horse", "owner")
    date_hierarchy = "start_date"
