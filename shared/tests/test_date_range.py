"""Tests for the inclusive DateRange value object."""

from __future__ import annotations

from datetime import date

import pytest

from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange, overlaps


def d(day: int) -> date:
    return date(2026, 6, day)


def test_single_day_range_is_valid() -> None:
    single = DateRange(d(5), d(5))
    assert len(single) == 1
    assert list(single.days()) == [d(5)]


def test_end_before_start_is_rejected() -> None:
    with pytest.raises(ValidationError):
        DateRange(d(10), d(9))


def test_missing_dates_are_rejected() -> None:
    with pytest.raises(ValidationError):
        DateRange(None, d(9))  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "first, second, expected",
    [
        ((5, 10), (10, 15), True),   # shared boundary day
        ((10, 15), (5, 10), True),
        ((1, 5), (6, 9), False),     # back to back
        ((3, 20), (8, 9), True),     # containment
        ((7, 7), (7, 7), True),      # identical single day
        ((7, 7), (8, 8), False),
    ],
)
def test_overlap_is_inclusive_and_symmetric(first, second, expected) -> None:
    a = DateRange(d(first[0]), d(first[1]))
    b = DateRange(d(second[0]), d(second[1]))
    assert a.overlaps(b) is expected
    assert b.overlaps(a) is expected
    assert overlaps(a, b) is expected


def test_overlap_with_non_range_raises_type_error() -> None:
    with pytest.raises(TypeError):
        DateRange(d(1), d(2)).overlaps((d(1), d(2)))  # type: ignore[arg-type]


def test_parse_iso_strings() -> None:
    parsed = DateRange.parse("2026-06-01", "2026-06-03")
    assert parsed == DateRange(d(1), d(3))
    assert len(parsed) == 3
    assert parsed.to_dict() == {"start_date": "2026-06-01", "end_date": "2026-06-03"}


@pytest.mark.parametrize("start, end", [("", "2026-06-03"), ("2026-13-01", "2026-06-03"), ("2026-06-05", "2026-06-03")])
def test_parse_rejects_bad_input(start, end) -> None:
    with pytest.raises(ValidationError):
        DateRange.parse(start, end)


def test_contains_both_ends() -> None:
    window = DateRange(d(3), d(6))
    assert window.contains(d(3))
    assert window.contains(d(6))
    assert not window.contains(d(7))
