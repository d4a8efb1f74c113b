"""Read-side helpers for the owner dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List

from shared.infrastructure.errors import store_errors
from apps.horses.models import Horse

from .domain.entities import RequestStatus
from .models import BorrowRequest


@dataclass
class OwnerDashboard:
    total_horses: int
    pending_requests: int
    approved_requests: int
    active_borrows: int
    recent_requests: List[BorrowRequest] = field(default_factory=list)


def owner_dashboard(owner, today: date, recent_limit: int = 10) -> OwnerDashboard:
    """
    Counts for the owner dashboard

    An active borrow is an approved request whose range contains ``today``.
    Rows still carrying a legacy status spelling are counted with their
    canonical status.
    """
    with store_errors(f"building dashboard for owner {owner.pk}"):
        requests = BorrowRequest.objects.filter(horse__owner=owner)
        approved = requests.filter(status__in=RequestStatus.APPROVED.spellings)
        recent = list(
            requests.select_related("horse", "borrower").order_by("-created_at")[:recent_limit]
        )
        return OwnerDashboard(
            total_horses=Horse.objects.filter(owner=owner).count(),
            pending_requests=requests.filter(status__in=RequestStatus.PENDING.spellings).count(),
            approved_requests=approved.count(),
            active_borrows=approved.filter(start_date__lte=today, end_date__gte=today).count(),
            recent_requests=recent,
        )
