"""
Blocked range entity

An owner-declared span during which a horse is unavailable for reasons
unrelated to any borrow request (vacation, maintenance). Blocks are
created and deleted, never edited in place.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain.base import Entity
from shared.domain.value_objects import DateRange

from .timeline import BLOCKED_LABEL, UnavailableKind, UnavailableRange


@dataclass(eq=False)
class BlockedRange(Entity):
    horse_id: UUID
    owner_id: int
    range: DateRange
    reason: Optional[str] = None

    @property
    def label(self) -> str:
        reason = (self.reason or '').strip()
        return reason or BLOCKED_LABEL

    def as_unavailable(self) -> UnavailableRange:
        return UnavailableRange(
            kind=UnavailableKind.BLOCKED,
            range=self.range,
            source_id=self.id,
            label=self.label,
            created_at=self.created_at,
        )
