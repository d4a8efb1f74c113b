"""Horse browse endpoints."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Horse
from .serializers import HorseSerializer


class HorseViewSet(viewsets.ReadOnlyModelViewSet):
    """Active horses for browsing; owners also see their inactive ones via ``mine``."""

    serializer_class = HorseSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Horse.objects.select_related("owner").all()
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["owner", "breed"]
    search_fields = ["name", "breed", "location"]
    ordering_fields = ["name", "created_at"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "mine":
            return qs.filter(owner=self.request.user)
        return qs.filter(is_active=True)

    @action(detail=False, methods=["get"])
    def mine(self, request):
        """Horses listed by the current user, active or not."""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)
