"""Tests for the BorrowRequest aggregate and its status machine."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from apps.availability.domain.timeline import UnavailableKind
from apps.borrowing.domain.entities import BorrowRequest, RequestStatus
from apps.borrowing.domain.events import (
    BorrowRequestApproved,
    BorrowRequestCreated,
    BorrowRequestDeleted,
    BorrowRequestRejected,
)
from apps.horses.domain import HorseRef
from shared.domain.exceptions import InvalidTransitionError, ValidationError
from shared.domain.value_objects import DateRange

OWNER_ID = 1
BORROWER_ID = 2


@pytest.fixture
def horse() -> HorseRef:
    return HorseRef(id=uuid4(), owner_id=OWNER_ID, is_active=True, name="Comet")


@pytest.fixture
def request_(horse) -> BorrowRequest:
    return BorrowRequest.submit(horse, BORROWER_ID, DateRange(date(2026, 5, 1), date(2026, 5, 3)), "  Trail ride  ")


def test_submit_creates_pending_request_with_event(request_, horse) -> None:
    assert request_.status == RequestStatus.PENDING
    assert request_.message == "Trail ride"
    assert not request_.blocks_dates

    [event] = request_.events
    assert isinstance(event, BorrowRequestCreated)
    assert event.owner_id == OWNER_ID
    assert event.borrower_id == BORROWER_ID
    assert event.horse_id == horse.id


def test_approve_makes_dates_unavailable(request_) -> None:
    request_.clear_events()
    request_.approve(OWNER_ID)

    assert request_.status == RequestStatus.APPROVED
    assert request_.blocks_dates
    assert request_.decided_at is not None
    assert isinstance(request_.events[0], BorrowRequestApproved)

    unavailable = request_.as_unavailable()
    assert unavailable.kind == UnavailableKind.BOOKING
    assert unavailable.source_id == request_.id


def test_reject_never_blocks_dates(request_) -> None:
    request_.reject(OWNER_ID)

    assert request_.status == RequestStatus.REJECTED
    assert not request_.blocks_dates
    assert isinstance(request_.events[-1], BorrowRequestRejected)


@pytest.mark.parametrize("decide", ["approve", "reject"])
def test_decided_requests_cannot_change_again(request_, decide) -> None:
    request_.reject(OWNER_ID)
    with pytest.raises(InvalidTransitionError):
        getattr(request_, decide)(OWNER_ID)


def test_deleted_event_carries_previous_status(request_) -> None:
    request_.approve(OWNER_ID)
    request_.mark_deleted(OWNER_ID, deleted_by=BORROWER_ID)

    event = request_.events[-1]
    assert isinstance(event, BorrowRequestDeleted)
    assert event.status == RequestStatus.APPROVED
    assert event.freed_dates
    assert event.deleted_by == BORROWER_ID


@pytest.mark.parametrize(
    "stored, expected",
    [
        ("pending", RequestStatus.PENDING),
        ("APPROVED", RequestStatus.APPROVED),
        ("declined", RequestStatus.REJECTED),
        ("accepted", RequestStatus.APPROVED),
    ],
)
def test_status_normalize_accepts_legacy_spellings(stored, expected) -> None:
    assert RequestStatus.normalize(stored) is expected


def test_status_normalize_rejects_unknown_values() -> None:
    with pytest.raises(ValidationError):
        RequestStatus.normalize("cancelled")


def test_status_spellings_cover_legacy_aliases() -> None:
    assert RequestStatus.APPROVED.spellings == ("approved", "accepted")
    assert RequestStatus.REJECTED.spellings == ("rejected", "declined")
    assert RequestStatus.PENDING.spellings == ("pending",)
    for status in RequestStatus:
        assert all(RequestStatus.normalize(spelling) is status for spelling in status.spellings)
