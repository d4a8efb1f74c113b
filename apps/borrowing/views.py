"""API views for borrow requests."""

from __future__ import annotations

from uuid import UUID

from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus

from .application.command_handlers import (
    ApproveBorrowRequestCommand,
    CreateBorrowRequestCommand,
    DeleteBorrowRequestCommand,
    RejectBorrowRequestCommand,
)
from .filters import BorrowRequestFilterSet
from .models import BorrowRequest
from .serializers import BorrowRequestCreateSerializer, BorrowRequestSerializer, OwnerDashboardSerializer
from .services import owner_dashboard


class BorrowRequestViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Borrow requests visible to the caller

    Borrowers see their own requests, owners see requests for their horses,
    staff see everything. State changes go through the command handlers.
    """

    queryset = BorrowRequest.objects.select_related("horse", "horse__owner", "borrower").all()
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BorrowRequestFilterSet
    ordering_fields = ["created_at", "start_date", "status"]
    ordering = ["-created_at"]
    lookup_value_regex = "[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BorrowRequestCreateSerializer
        return BorrowRequestSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(Q(borrower=user) | Q(horse__owner=user))

    def _read_response(self, request_id, status_code=status.HTTP_200_OK) -> Response:
        instance = self.queryset.get(pk=request_id)
        serializer = BorrowRequestSerializer(instance, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        borrow_request = message_bus.handle_command(
            CreateBorrowRequestCommand(
                actor_id=request.user.pk,
                horse_id=serializer.validated_data["horse"],
                start_date=serializer.validated_data["start_date"],
                end_date=serializer.validated_data["end_date"],
                message=serializer.validated_data.get("message", ""),
            )
        )
        return self._read_response(borrow_request.id, status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):  # type: ignore
        message_bus.handle_command(
            DeleteBorrowRequestCommand(
                actor_id=request.user.pk,
                request_id=UUID(pk),
                actor_is_staff=bool(getattr(request.user, "is_staff", False)),
            )
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        borrow_request = message_bus.handle_command(
            ApproveBorrowRequestCommand(actor_id=request.user.pk, request_id=UUID(pk))
        )
        return self._read_response(borrow_request.id)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        borrow_request = message_bus.handle_command(
            RejectBorrowRequestCommand(actor_id=request.user.pk, request_id=UUID(pk))
        )
        return self._read_response(borrow_request.id)

    @action(detail=False, methods=["get"], url_path="owner-summary")
    def owner_summary(self, request):  # type: ignore
        """Counts and latest requests for the caller's horses."""
        dashboard = owner_dashboard(request.user, timezone.localdate())
        serializer = OwnerDashboardSerializer(dashboard, context=self.get_serializer_context())
        return Response(serializer.data)
