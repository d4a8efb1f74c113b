"""Admin registration for borrow requests."""

from __future__ import annotations

from django.contrib import admin

from .models import BorrowRequest


@admin.register(BorrowRequest)
class BorrowRequestAdmin(admin.ModelAdmin):
    list_display = (
        "horse",
        "borrower",
        "status",
        "start_date",
        "end_date",
        "created_at",
        "decided_at",
    )
    list_filter = ("status", "start_date")
    search_fields = ("horse__name", "borrower__email")
    readonly_fields = ("id", "horse", "borrower", "start_date", "end_date", "status", "created_at", "decided_at", "updated_at")
    date_hierarchy = "start_date"

    def has_add_permission(self, request):  # type: ignore
        # Requests are created through the API only
        return False
