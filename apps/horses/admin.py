"""Admin registrations for horses."""

from __future__ import annotations

from django.contrib import admin

from .models import Horse


@admin.register(Horse)
class HorseAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "breed", "location", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "breed", "location", "owner__email")
    readonly_fields = ("id", "created_at", "updated_at")
    raw_id_fields = ("owner",)
