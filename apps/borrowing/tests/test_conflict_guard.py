"""Tests for the Conflict Guard over blocks and approved requests."""

from __future__ import annotations

from datetime import date

import pytest

from apps.availability.domain.blocks import BlockedRange
from apps.availability.services import AvailabilityAggregator
from apps.borrowing.domain.entities import BorrowRequest
from apps.borrowing.guard import ConflictGuard
from shared.domain.exceptions import ConflictError, DependencyError
from shared.domain.value_objects import DateRange

from .fakes import build_fakes

OWNER_ID = 10
BORROWER_ID = 20


def d(day: int) -> date:
    return date(2026, 8, day)


@pytest.fixture
def env():
    fakes = build_fakes()
    store = fakes["store"]
    horse = store.add_horse(OWNER_ID)
    aggregator = AvailabilityAggregator(fakes["block_repo"], fakes["request_repo"])
    return {**fakes, "horse": horse, "guard": ConflictGuard(aggregator)}


def _approved(env, start: int, end: int) -> BorrowRequest:
    request = BorrowRequest.submit(env["horse"], BORROWER_ID, DateRange(d(start), d(end)))
    request.approve(OWNER_ID)
    request.clear_events()
    env["request_repo"].add(request)
    return request


def _pending(env, start: int, end: int) -> BorrowRequest:
    request = BorrowRequest.submit(env["horse"], BORROWER_ID, DateRange(d(start), d(end)))
    request.clear_events()
    env["request_repo"].add(request)
    return request


def test_free_dates_are_allowed(env) -> None:
    decision = env["guard"].check(env["horse"].id, DateRange(d(1), d(5)))
    assert decision.allowed
    assert decision.conflicts == ()


def test_approved_request_conflicts_on_shared_boundary_day(env) -> None:
    _approved(env, 10, 15)

    decision = env["guard"].check(env["horse"].id, DateRange(d(15), d(18)))

    assert not decision.allowed
    assert [item.kind.value for item in decision.conflicts] == ["booking"]
    assert "1 approved booking" in decision.reason


def test_back_to_back_ranges_do_not_conflict(env) -> None:
    _approved(env, 10, 15)
    assert env["guard"].check(env["horse"].id, DateRange(d(16), d(20))).allowed


def test_pending_requests_never_conflict(env) -> None:
    _pending(env, 1, 30)
    assert env["guard"].check(env["horse"].id, DateRange(d(5), d(6))).allowed


def test_blocked_range_conflicts(env) -> None:
    block = BlockedRange(horse_id=env["horse"].id, owner_id=OWNER_ID, range=DateRange(d(3), d(4)), reason="Farrier")
    env["block_repo"].add(block)

    with pytest.raises(ConflictError) as excinfo:
        env["guard"].ensure_allowed(env["horse"].id, DateRange(d(4), d(9)))

    [conflict] = excinfo.value.conflicts
    assert conflict.label == "Farrier"
    assert conflict.source_id == block.id


def test_request_does_not_conflict_with_itself(env) -> None:
    request = _approved(env, 10, 12)
    decision = env["guard"].check(env["horse"].id, request.range, exclude_request_id=request.id)
    assert decision.allowed


def test_every_conflict_is_reported(env) -> None:
    _approved(env, 1, 2)
    _approved(env, 8, 9)
    env["block_repo"].add(
        BlockedRange(horse_id=env["horse"].id, owner_id=OWNER_ID, range=DateRange(d(5), d(5)))
    )

    decision = env["guard"].check(env["horse"].id, DateRange(d(1), d(31)))

    assert [item.start for item in decision.conflicts] == [d(1), d(5), d(8)]
    assert "2 approved bookings and 1 blocked range" in decision.reason


def test_store_failure_is_not_reported_as_available(env) -> None:
    env["store"].fail_reads = True
    with pytest.raises(DependencyError):
        env["guard"].check(env["horse"].id, DateRange(d(1), d(2)))
