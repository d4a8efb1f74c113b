"""Availability API views: blocked ranges, unavailable list, advisory check and calendar."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import generics, permissions, status  # type: ignore
from rest_framework.pagination import PageNumberPagination  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.application.message_bus import message_bus
from shared.domain.exceptions import AuthorizationError, NotFoundError
from shared.domain.value_objects import DateRange
from apps.horses.repositories import DjangoHorseRepository

from .application.block_handlers import AddBlockCommand, DeleteBlockCommand
from .calendar import build_month_calendar, group_by_month, upcoming
from .repositories import DjangoBlockedRangeRepository
from .serializers import (
    AvailabilityCheckQuerySerializer,
    BlockCreateSerializer,
    BlockedRangeSerializer,
    CalendarDaySerializer,
    CalendarQuerySerializer,
    MonthGroupSerializer,
    UnavailableRangeSerializer,
)
from .services import default_aggregator


class AvailabilityPagination(PageNumberPagination):
    page_size_query_param = "page_size"
    max_page_size = 100

    def get_page_size(self, request):  # type: ignore
        self.page_size = getattr(settings, "AVAILABILITY_PAGE_SIZE", 20)
        return super().get_page_size(request)


class HorseAvailabilityMixin:
    """Resolves the horse from the URL and whether the caller owns it."""

    horse_repo = DjangoHorseRepository()

    def get_horse(self):
        if not hasattr(self, "_horse"):
            horse = self.horse_repo.get(self.kwargs["horse_id"])
            if not horse.is_active and not self.is_owner(horse):
                raise NotFoundError()
            self._horse = horse
        return self._horse

    def is_owner(self, horse=None) -> bool:
        horse = horse or self.get_horse()
        user = self.request.user
        return bool(user and user.is_authenticated and horse.is_owned_by(user.pk))

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["show_sources"] = self.is_owner()
        return context


class BlockListCreateView(HorseAvailabilityMixin, generics.GenericAPIView):
    """Blocked ranges of a horse; owner only."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = BlockCreateSerializer

    def get(self, request, horse_id):  # type: ignore
        if not self.is_owner():
            raise AuthorizationError("Only the horse owner can manage blocked dates.")
        blocks = DjangoBlockedRangeRepository().for_horse(self.get_horse().id)
        return Response(BlockedRangeSerializer(blocks, many=True).data)

    def post(self, request, horse_id):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = message_bus.handle_command(
            AddBlockCommand(
                actor_id=request.user.pk,
                horse_id=horse_id,
                start_date=serializer.validated_data["start_date"],
                end_date=serializer.validated_data["end_date"],
                reason=serializer.validated_data.get("reason", ""),
            )
        )
        data = {
            "block": BlockedRangeSerializer(result.block).data,
            "overlapping_bookings": UnavailableRangeSerializer(
                result.overlapping_bookings,
                many=True,
                context={"show_sources": True},
            ).data,
        }
        return Response(data, status=status.HTTP_201_CREATED)


class BlockDeleteView(APIView):
    """Delete a block; deleting an already removed block still succeeds."""

    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, horse_id, block_id):  # type: ignore
        message_bus.handle_command(
            DeleteBlockCommand(actor_id=request.user.pk, horse_id=horse_id, block_id=block_id)
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class AvailabilityListView(HorseAvailabilityMixin, generics.GenericAPIView):
    """
    Unavailable ranges of a horse grouped by month

    ``?upcoming=1`` keeps only ranges ending today or later. Pagination
    applies to ranges; each page is grouped on its own.
    """

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    pagination_class = AvailabilityPagination

    def get(self, request, horse_id):  # type: ignore
        horse = self.get_horse()
        ranges = default_aggregator().unavailable_ranges(horse.id)
        if request.query_params.get("upcoming") in {"1", "true", "yes"}:
            ranges = upcoming(ranges, timezone.localdate())

        page = self.paginate_queryset(ranges)
        groups = group_by_month(page if page is not None else ranges)
        data = MonthGroupSerializer(groups, many=True, context=self.get_serializer_context()).data
        if page is not None:
            return self.get_paginated_response(data)
        return Response(data)


class AvailabilityCheckView(HorseAvailabilityMixin, generics.GenericAPIView):
    """
    Advisory conflict check for a proposed range

    The answer is provisional. Creating or approving a request re-checks
    authoritatively and may still fail with ``dates_unavailable``.
    """

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]

    def get(self, request, horse_id):  # type: ignore
        query = AvailabilityCheckQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        proposed = DateRange(query.validated_data["start"], query.validated_data["end"])

        conflicts = default_aggregator().find_conflicts(self.get_horse().id, proposed)
        return Response(
            {
                "available": not conflicts,
                "advisory": True,
                "start_date": proposed.start,
                "end_date": proposed.end,
                "conflicts": [conflict.public_dict() for conflict in conflicts],
            }
        )


class AvailabilityCalendarView(HorseAvailabilityMixin, generics.GenericAPIView):
    """Month calendar; a day covered by a booking shows as booking even if also blocked."""

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]

    def get(self, request, horse_id):  # type: ignore
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        today = timezone.localdate()
        year = query.validated_data.get("year", today.year)
        month = query.validated_data.get("month", today.month)

        horse = self.get_horse()
        ranges = default_aggregator().unavailable_ranges(horse.id)
        month_calendar = build_month_calendar(year, month, ranges)
        days = CalendarDaySerializer(month_calendar.days, many=True, context=self.get_serializer_context()).data
        return Response(
            {
                "horse_id": str(horse.id),
                "year": year,
                "month": month,
                "days": days,
            }
        )
