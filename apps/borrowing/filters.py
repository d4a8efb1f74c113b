"""FilterSet for borrow request lists (owner dashboard and borrower view)."""

from __future__ import annotations

import django_filters  # type: ignore

from shared.domain.exceptions import ValidationError

from .domain.entities import RequestStatus
from .models import BorrowRequest


class BorrowRequestFilterSet(django_filters.FilterSet):
    """Filter by status, horse, the caller's side of the request and a date window."""

    status = django_filters.CharFilter(method="filter_status")
    horse = django_filters.UUIDFilter(field_name="horse_id")
    role = django_filters.ChoiceFilter(
        method="filter_role",
        choices=(("owner", "owner"), ("borrower", "borrower")),
    )
    # Requests overlapping [from, to], both inclusive
    date_from = django_filters.DateFilter(field_name="end_date", lookup_expr="gte", label="from")
    date_to = django_filters.DateFilter(field_name="start_date", lookup_expr="lte", label="to")

    class Meta:
        model = BorrowRequest
        fields = ["status", "horse", "role"]

    def filter_status(self, queryset, name, value):  # type: ignore
        try:
            status = RequestStatus.normalize(value)
        except ValidationError:
            return queryset.none()
        return queryset.filter(status__in=status.spellings)

    def filter_role(self, queryset, name, value):  # type: ignore
        user = getattr(self.request, "user", None)
        if user is None or not user.is_authenticated:
            return queryset.none()
        if value == "owner":
            return queryset.filter(horse__owner=user)
        return queryset.filter(borrower=user)
