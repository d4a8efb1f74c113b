"""Serializers for blocked ranges and availability read views."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class BlockedRangeSerializer(serializers.Serializer):
    """Read representation of a ``BlockedRange`` domain entity."""

    id = serializers.UUIDField(read_only=True)
    horse_id = serializers.UUIDField(read_only=True)
    start_date = serializers.DateField(source="range.start", read_only=True)
    end_date = serializers.DateField(source="range.end", read_only=True)
    days = serializers.SerializerMethodField()
    reason = serializers.CharField(read_only=True, allow_null=True)
    label = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)

    def get_days(self, obj) -> int:
        return len(obj.range)


class BlockCreateSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class UnavailableRangeSerializer(serializers.Serializer):
    """
    One unavailable range

    ``source_id`` is only included when the context says the viewer owns
    the horse.
    """

    kind = serializers.CharField(source="kind.value")
    start_date = serializers.DateField(source="range.start")
    end_date = serializers.DateField(source="range.end")
    label = serializers.CharField()
    source_id = serializers.UUIDField()

    def to_representation(self, instance):  # type: ignore
        data = super().to_representation(instance)
        if not self.context.get("show_sources"):
            data.pop("source_id", None)
        return data


class MonthGroupSerializer(serializers.Serializer):
    month = serializers.CharField(source="key")
    ranges = serializers.SerializerMethodField()

    def get_ranges(self, obj):  # type: ignore
        return UnavailableRangeSerializer(obj.ranges, many=True, context=self.context).data


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField(source="day")
    status = serializers.CharField(source="status.value")
    labels = serializers.ListField(child=serializers.CharField())
    source_ids = serializers.ListField(child=serializers.UUIDField())

    def to_representation(self, instance):  # type: ignore
        data = super().to_representation(instance)
        if not self.context.get("show_sources"):
            data.pop("source_ids", None)
        return data


class AvailabilityCheckQuerySerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()


class CalendarQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1, max_value=9999, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
