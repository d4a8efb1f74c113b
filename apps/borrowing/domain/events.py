"""
Borrowing Domain Events

Published after commit through the message bus. Consumers (notifications,
the messaging pipeline) never affect the transition that raised them.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange
from apps.borrowing.domain.entities import RequestStatus


@dataclass(kw_only=True)
class BorrowRequestEvent(DomainEvent):
    """Fields shared by every lifecycle event: request, horse, both parties, status and dates."""
    request_id: UUID
    horse_id: UUID
    borrower_id: int
    owner_id: int
    status: RequestStatus
    dates: DateRange


@dataclass(kw_only=True)
class BorrowRequestCreated(BorrowRequestEvent):
    """
    Event: A borrower submitted a pending request

    Triggers:
    - Notify the horse owner
    - Open a conversation thread (external pipeline)
    """


@dataclass(kw_only=True)
class BorrowRequestApproved(BorrowRequestEvent):
    """
    Event: The owner approved a request (PENDING -> APPROVED)

    Triggers:
    - Notify the borrower
    """


@dataclass(kw_only=True)
class BorrowRequestRejected(BorrowRequestEvent):
    """
    Event: The owner rejected a request (PENDING -> REJECTED)

    Triggers:
    - Notify the borrower
    """


@dataclass(kw_only=True)
class BorrowRequestDeleted(BorrowRequestEvent):
    """
    Event: A request was deleted; ``status`` is the status it had

    Triggers:
    - Notify the parties other than the deleter when an approved booking
      was cancelled
    """
    deleted_by: Optional[int] = None

    @property
    def freed_dates(self) -> bool:
        return self.status == RequestStatus.APPROVED
