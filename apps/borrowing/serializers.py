"""Serializers for borrow requests."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.entities import RequestStatus
from .models import BorrowRequest


class BorrowRequestSerializer(serializers.ModelSerializer):
    horse_name = serializers.CharField(source="horse.name", read_only=True)
    owner = serializers.ReadOnlyField(source="horse.owner_id")
    borrower_name = serializers.CharField(source="borrower.display_name", read_only=True)
    status = serializers.SerializerMethodField()
    status_display = serializers.ReadOnlyField(source="get_status_display")
    days = serializers.SerializerMethodField()

    class Meta:
        model = BorrowRequest
        fields = [
            "id",
            "horse",
            "horse_name",
            "owner",
            "borrower",
            "borrower_name",
            "status",
            "status_display",
            "start_date",
            "end_date",
            "days",
            "message",
            "created_at",
            "decided_at",
        ]
        read_only_fields = fields

    def get_status(self, obj: BorrowRequest) -> str:
        return RequestStatus.normalize(obj.status).value

    def get_days(self, obj: BorrowRequest) -> int:
        return (obj.end_date - obj.start_date).days + 1


class BorrowRequestCreateSerializer(serializers.Serializer):
    horse = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    message = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)


class OwnerDashboardSerializer(serializers.Serializer):
    total_horses = serializers.IntegerField()
    pending_requests = serializers.IntegerField()
    approved_requests = serializers.IntegerField()
    active_borrows = serializers.IntegerField()
    recent_requests = BorrowRequestSerializer(many=True)
