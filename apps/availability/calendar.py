"""
Read views over the unavailable timeline

Pure projections of ``AvailabilityAggregator`` output for the owner
dashboard and the borrower-facing horse page. Nothing here is cached.
"""

from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from itertools import groupby
from typing import Iterable, List, Tuple

from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange

from .domain.timeline import UnavailableKind, UnavailableRange, sorted_ranges


class DayStatus(str, Enum):
    AVAILABLE = 'available'
    BLOCKED = 'blocked'
    BOOKING = 'booking'


# Higher wins when several ranges cover the same day
DAY_PRIORITY = {
    UnavailableKind.BLOCKED: 1,
    UnavailableKind.BOOKING: 2,
}


@dataclass(frozen=True)
class CalendarDay:
    day: date
    status: DayStatus
    ranges: Tuple[UnavailableRange, ...] = ()

    @property
    def source_ids(self) -> List:
        return [item.source_id for item in self.ranges]

    @property
    def labels(self) -> List[str]:
        return [item.label for item in self.ranges]

    @property
    def is_available(self) -> bool:
        return self.status == DayStatus.AVAILABLE


@dataclass(frozen=True)
class MonthCalendar:
    year: int
    month: int
    days: Tuple[CalendarDay, ...] = ()

    @property
    def range(self) -> DateRange:
        return month_range(self.year, self.month)

    def day(self, value: date) -> CalendarDay:
        return self.days[value.day - 1]

    def count(self, status: DayStatus) -> int:
        return sum(1 for item in self.days if item.status == status)


@dataclass
class MonthGroup:
    year: int
    month: int
    ranges: List[UnavailableRange] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def month_range(year: int, month: int) -> DateRange:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12.")
    if not date.min.year <= year <= date.max.year:
        raise ValidationError("Year is out of range.")
    last_day = _calendar.monthrange(year, month)[1]
    return DateRange(date(year, month, 1), date(year, month, last_day))


def day_status(covering: Iterable[UnavailableRange]) -> DayStatus:
    """Status of the highest-priority kind covering a day."""
    best = None
    for item in covering:
        if best is None or DAY_PRIORITY[item.kind] > DAY_PRIORITY[best]:
            best = item.kind
    if best is None:
        return DayStatus.AVAILABLE
    return DayStatus(best.value)


def build_month_calendar(year: int, month: int, ranges: Iterable[UnavailableRange]) -> MonthCalendar:
    """One entry per day of the month, with every range covering that day."""
    window = month_range(year, month)
    relevant = [item for item in sorted_ranges(list(ranges)) if item.range.overlaps(window)]

    days = []
    for current in window.days():
        covering = tuple(item for item in relevant if item.range.contains(current))
        days.append(CalendarDay(day=current, status=day_status(covering), ranges=covering))
    return MonthCalendar(year=year, month=month, days=tuple(days))


def upcoming(ranges: Iterable[UnavailableRange], today: date) -> List[UnavailableRange]:
    """Ranges that end today or later."""
    return [item for item in ranges if item.range.end >= today]


def group_by_month(ranges: Iterable[UnavailableRange]) -> List[MonthGroup]:
    """
    Group ranges under the month they start in

    Ranges are put in timeline order first, so each month appears once
    and groups come out in calendar order.
    """
    ordered = sorted_ranges(list(ranges))
    groups = []
    for (year, month), items in groupby(ordered, key=lambda item: (item.range.start.year, item.range.start.month)):
        groups.append(MonthGroup(year=year, month=month, ranges=list(items)))
    return groups
