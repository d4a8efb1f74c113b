"""
Common Value Objects

Value objects used across multiple domains:
- DateRange: an inclusive closed interval of calendar days
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents the days from start to end, both inclusive.
    A one-day range has start == end. Used for blocked ranges,
    borrow requests and every conflict check.
    """
    start: date
    end: date

    def __post_init__(self):
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise ValidationError("Start and end dates are required")
        if not self.is_valid(self.start, self.end):
            raise ValidationError(
                f"Start date ({self.start}) must be on or before end date ({self.end})"
            )

    @staticmethod
    def is_valid(start: date, end: date) -> bool:
        return start <= end

    @classmethod
    def parse(cls, start: str | None, end: str | None) -> 'DateRange':
        """Build a range from ISO strings (YYYY-MM-DD)."""
        if not start or not end:
            raise ValidationError("Start and end dates are required")
        try:
            return cls(date.fromisoformat(str(start)), date.fromisoformat(str(end)))
        except ValueError as exc:
            if isinstance(exc, ValidationError):
                raise
            raise ValidationError(f"Dates must use the YYYY-MM-DD format: {exc}") from exc

    def overlaps(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Both ends are inclusive, so a single shared day is an overlap.

        Examples:
            - DateRange(5, 10) overlaps with DateRange(10, 15) -> True
            - DateRange(1, 5) overlaps with DateRange(6, 9) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return self.start <= other.end and other.start <= self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        """Number of calendar days covered, counting both ends."""
        return (self.end - self.start).days + 1

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start}, {self.end})"

    def to_dict(self) -> dict:
        return {'start_date': self.start.isoformat(), 'end_date': self.end.isoformat()}


def overlaps(a: DateRange, b: DateRange) -> bool:
    """Inclusive overlap predicate shared by advisory checks and the Conflict Guard."""
    return a.overlaps(b)
