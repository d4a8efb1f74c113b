"""
Availability Aggregator

Combines a horse's blocked ranges with its approved borrow requests into
one sorted timeline. Nothing is cached: every call re-reads both sources,
so the result is never stale relative to committed state.

A failing source query propagates as ``DependencyError``. The aggregator
never answers "no conflicts" when the true state is unknown.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from shared.domain.value_objects import DateRange

from .domain.timeline import AvailabilityTimeline, UnavailableRange

logger = logging.getLogger(__name__)


class AvailabilityAggregator:

    def __init__(self, block_repo, request_repo):
        self.block_repo = block_repo
        self.request_repo = request_repo

    def timeline(self, horse_id: UUID, exclude_request_id: Optional[UUID] = None) -> AvailabilityTimeline:
        """
        Build the unavailable timeline of a horse

        ``exclude_request_id`` leaves one approved request out, so a request
        can be checked against every other approved booking.
        """
        blocks = self.block_repo.for_horse(horse_id)
        bookings = self.request_repo.approved_for_horse(horse_id, exclude_request_id=exclude_request_id)
        timeline = AvailabilityTimeline.build(horse_id, blocks=blocks, bookings=bookings)
        logger.debug(
            f"Timeline for horse {horse_id}: {len(blocks)} blocks, {len(bookings)} approved bookings"
        )
        return timeline

    def unavailable_ranges(self, horse_id: UUID) -> List[UnavailableRange]:
        return list(self.timeline(horse_id).ranges)

    def has_conflict(self, horse_id: UUID, proposed: DateRange) -> bool:
        """Advisory check; the authoritative one runs in the Conflict Guard."""
        return self.timeline(horse_id).has_conflict(proposed)

    def find_conflicts(self, horse_id: UUID, proposed: DateRange) -> List[UnavailableRange]:
        return self.timeline(horse_id).find_conflicts(proposed)


def default_aggregator() -> AvailabilityAggregator:
    """Aggregator wired to the Django repositories."""
    from apps.borrowing.repositories import DjangoBorrowRequestRepository

    from .repositories import DjangoBlockedRangeRepository

    return AvailabilityAggregator(DjangoBlockedRangeRepository(), DjangoBorrowRequestRepository())
