"""
Conflict Guard

The authoritative availability check run at the moment of a state
transition. It always re-reads committed blocks and approved requests
through the aggregator and must be called inside the unit of work that
holds the horse lock, so check and write cannot interleave with another
transition on the same horse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

from shared.domain.exceptions import ConflictError
from shared.domain.value_objects import DateRange
from apps.availability.domain.timeline import UnavailableKind, UnavailableRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardDecision:
    """Either allowed, or a conflict listing what the dates collide with."""

    allowed: bool
    conflicts: Tuple[UnavailableRange, ...] = ()
    reason: str = ''

    @classmethod
    def allow(cls) -> 'GuardDecision':
        return cls(allowed=True)

    @classmethod
    def conflict(cls, conflicts) -> 'GuardDecision':
        conflicts = tuple(conflicts)
        return cls(allowed=False, conflicts=conflicts, reason=describe_conflicts(conflicts))


def describe_conflicts(conflicts) -> str:
    bookings = sum(1 for item in conflicts if item.kind == UnavailableKind.BOOKING)
    blocks = len(conflicts) - bookings
    parts = []
    if bookings:
        parts.append(f"{bookings} approved booking{'s' if bookings != 1 else ''}")
    if blocks:
        parts.append(f"{blocks} blocked range{'s' if blocks != 1 else ''}")
    return f"Those dates overlap {' and '.join(parts)}. Please choose different dates."


class ConflictGuard:

    def __init__(self, aggregator):
        self.aggregator = aggregator

    def check(
        self,
        horse_id: UUID,
        proposed: DateRange,
        exclude_request_id: Optional[UUID] = None,
    ) -> GuardDecision:
        """
        Evaluate ``proposed`` against freshly read unavailability

        ``exclude_request_id`` keeps a request from conflicting with itself
        when it is being approved.
        """
        timeline = self.aggregator.timeline(horse_id, exclude_request_id=exclude_request_id)
        conflicts = timeline.find_conflicts(proposed)
        if not conflicts:
            logger.debug(f"Guard allowed {proposed} for horse {horse_id}")
            return GuardDecision.allow()
        logger.info(
            f"Guard refused {proposed} for horse {horse_id}: "
            f"{len(conflicts)} conflicting range(s)"
        )
        return GuardDecision.conflict(conflicts)

    def ensure_allowed(
        self,
        horse_id: UUID,
        proposed: DateRange,
        exclude_request_id: Optional[UUID] = None,
    ) -> GuardDecision:
        decision = self.check(horse_id, proposed, exclude_request_id=exclude_request_id)
        if not decision.allowed:
            raise ConflictError(decision.reason, conflicts=decision.conflicts)
        return decision
