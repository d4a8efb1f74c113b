"""URL routing for blocked ranges and availability views under /horses/<horse_id>/."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    AvailabilityCalendarView,
    AvailabilityCheckView,
    AvailabilityListView,
    BlockDeleteView,
    BlockListCreateView,
)

urlpatterns = [
    path("<uuid:horse_id>/blocks/", BlockListCreateView.as_view(), name="horse-block-list"),
    path("<uuid:horse_id>/blocks/<uuid:block_id>/", BlockDeleteView.as_view(), name="horse-block-detail"),
    path("<uuid:horse_id>/availability/", AvailabilityListView.as_view(), name="horse-availability"),
    path(
        "<uuid:horse_id>/availability/check/",
        AvailabilityCheckView.as_view(),
        name="horse-availability-check",
    ),
    path(
        "<uuid:horse_id>/availability/calendar/",
        AvailabilityCalendarView.as_view(),
        name="horse-availability-calendar",
    ),
]
