"""
Borrowing Domain Entities

- RequestStatus: FSM states of a borrow request
- BorrowRequest: aggregate for one borrower's request of a date range
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from shared.domain.base import Aggregate, utcnow
from shared.domain.exceptions import InvalidTransitionError, ValidationError
from shared.domain.value_objects import DateRange
from apps.availability.domain.timeline import BOOKING_LABEL, UnavailableKind, UnavailableRange

LEGACY_STATUS_ALIASES = {
    'declined': 'rejected',
    'accepted': 'approved',
}


class RequestStatus(Enum):
    """
    Borrow Request Status Finite State Machine

    State transitions:
    - PENDING -> APPROVED (owner approves, Conflict Guard allows)
    - PENDING -> REJECTED (owner rejects)
    Deletion removes the request from any state.
    """
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    @classmethod
    def normalize(cls, value) -> 'RequestStatus':
        """Read a stored status, accepting legacy spellings."""
        if isinstance(value, cls):
            return value
        raw = str(value or '').strip().lower()
        raw = LEGACY_STATUS_ALIASES.get(raw, raw)
        try:
            return cls(raw)
        except ValueError as exc:
            raise ValidationError(f"Unknown request status: {value!r}") from exc

    @property
    def spellings(self) -> tuple:
        """Every stored spelling of this status, canonical first."""
        legacy = tuple(alias for alias, canonical in LEGACY_STATUS_ALIASES.items() if canonical == self.value)
        return (self.value,) + legacy


@dataclass(eq=False)
class BorrowRequest(Aggregate):
    """
    Borrow Request Aggregate Root

    Key invariants:
    - The range is a valid inclusive DateRange
    - Only pending requests can be approved or rejected
    - Only approved requests make a horse unavailable
    """

    horse_id: UUID
    borrower_id: int
    range: DateRange
    status: RequestStatus = RequestStatus.PENDING
    message: Optional[str] = None
    decided_at: Optional[datetime] = None

    @classmethod
    def submit(cls, horse, borrower_id: int, dates: DateRange, message: Optional[str] = None) -> 'BorrowRequest':
        """
        Create a pending request for ``horse``

        Events: BorrowRequestCreated
        """
        from apps.borrowing.domain.events import BorrowRequestCreated

        request = cls(
            horse_id=horse.id,
            borrower_id=borrower_id,
            range=dates,
            message=(message or '').strip() or None,
        )
        request.add_event(BorrowRequestCreated(**request._event_fields(horse.owner_id)))
        return request

    @property
    def blocks_dates(self) -> bool:
        return self.status == RequestStatus.APPROVED

    def ensure_pending(self, action: str):
        if self.status != RequestStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot {action} a request that is already {self.status.value}."
            )

    def approve(self, owner_id: int):
        """
        Approve the request (PENDING -> APPROVED)

        The caller must have run the Conflict Guard for this range,
        excluding this request, inside the same unit of work.
        Events: BorrowRequestApproved
        """
        from apps.borrowing.domain.events import BorrowRequestApproved

        self.ensure_pending('approve')
        self.status = RequestStatus.APPROVED
        self.decided_at = utcnow()
        self.add_event(BorrowRequestApproved(**self._event_fields(owner_id)))

    def reject(self, owner_id: int):
        """
        Reject the request (PENDING -> REJECTED)

        Events: BorrowRequestRejected
        """
        from apps.borrowing.domain.events import BorrowRequestRejected

        self.ensure_pending('reject')
        self.status = RequestStatus.REJECTED
        self.decided_at = utcnow()
        self.add_event(BorrowRequestRejected(**self._event_fields(owner_id)))

    def mark_deleted(self, owner_id: int, deleted_by: Optional[int]):
        """
        Record the deletion of this request

        Allowed from any status. Events: BorrowRequestDeleted
        """
        from apps.borrowing.domain.events import BorrowRequestDeleted

        self.add_event(BorrowRequestDeleted(deleted_by=deleted_by, **self._event_fields(owner_id)))

    def as_unavailable(self) -> UnavailableRange:
        return UnavailableRange(
            kind=UnavailableKind.BOOKING,
            range=self.range,
            source_id=self.id,
            label=BOOKING_LABEL,
            created_at=self.created_at,
        )

    def _event_fields(self, owner_id: int) -> dict:
        return {
            'aggregate_id': self.id,
            'request_id': self.id,
            'horse_id': self.horse_id,
            'borrower_id': self.borrower_id,
            'owner_id': owner_id,
            'status': self.status,
            'dates': self.range,
        }
