"""Serializers for horse listings."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Horse


class HorseSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source="owner.display_name", read_only=True)

    class Meta:
        model = Horse
        fields = [
            "id",
            "owner",
            "owner_name",
            "name",
            "breed",
            "location",
            "description",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
