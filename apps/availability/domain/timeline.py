"""
Unavailable timeline

A horse's unavailable time is the union of its blocked ranges and its
approved borrow requests. The timeline is derived on every read and is
never stored.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange

BLOCKED_LABEL = 'Blocked'
BOOKING_LABEL = 'Approved booking'

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class UnavailableKind(str, Enum):
    BLOCKED = 'blocked'
    BOOKING = 'booking'


@dataclass(frozen=True)
class UnavailableRange(ValueObject):
    """
    One reason a horse is unavailable

    Each source row is reported individually with its own kind and label,
    so callers can show why a day is taken and which record to delete.
    """
    kind: UnavailableKind
    range: DateRange
    source_id: UUID
    label: str
    created_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def start(self) -> date:
        return self.range.start

    @property
    def end(self) -> date:
        return self.range.end

    def overlaps(self, proposed: DateRange) -> bool:
        return self.range.overlaps(proposed)

    def public_dict(self) -> dict:
        """Fields safe to show to any party: kind, dates and label."""
        return {
            'kind': self.kind.value,
            'start_date': self.range.start.isoformat(),
            'end_date': self.range.end.isoformat(),
            'label': self.label,
        }

    def to_dict(self) -> dict:
        payload = self.public_dict()
        payload['source_id'] = str(self.source_id)
        return payload


def find_conflicts(proposed: DateRange, ranges: Iterable[UnavailableRange]) -> List[UnavailableRange]:
    """Every unavailable range that shares at least one day with ``proposed``."""
    return [item for item in ranges if item.range.overlaps(proposed)]


def has_conflict(proposed: DateRange, ranges: Iterable[UnavailableRange]) -> bool:
    return any(item.range.overlaps(proposed) for item in ranges)


def _sort_key(item: UnavailableRange):
    return item.range.start, item.created_at or _EARLIEST


@dataclass(frozen=True)
class AvailabilityTimeline:
    """
    Sorted, de-duplicated list of unavailable ranges for one horse

    Ordered by start date; ranges starting on the same day keep creation
    order. Adjacent or overlapping ranges are never merged.
    """
    horse_id: UUID
    ranges: Tuple[UnavailableRange, ...] = ()

    @classmethod
    def build(
        cls,
        horse_id: UUID,
        blocks: Iterable = (),
        bookings: Iterable = (),
    ) -> 'AvailabilityTimeline':
        """
        Merge blocked ranges and approved bookings

        ``blocks`` and ``bookings`` are domain objects exposing
        ``as_unavailable()``; bookings must already be filtered to the
        approved status by the caller.
        """
        seen = set()
        items = []
        for source in list(blocks) + list(bookings):
            item = source.as_unavailable()
            key = (item.kind, item.source_id)
            if key in seen:
                continue
            seen.add(key)
            items.append(item)
        return cls(horse_id=horse_id, ranges=tuple(sorted(items, key=_sort_key)))

    def has_conflict(self, proposed: DateRange) -> bool:
        return has_conflict(proposed, self.ranges)

    def find_conflicts(self, proposed: DateRange) -> List[UnavailableRange]:
        return find_conflicts(proposed, self.ranges)

    def of_kind(self, kind: UnavailableKind) -> List[UnavailableRange]:
        return [item for item in self.ranges if item.kind == kind]

    def __iter__(self):
        return iter(self.ranges)

    def __len__(self):
        return len(self.ranges)


def sorted_ranges(ranges: Sequence[UnavailableRange]) -> List[UnavailableRange]:
    return sorted(ranges, key=_sort_key)
