"""
Borrow Request Command Handlers

These are the use cases for the borrowing domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBorrowRequestCommand: A borrower requests dates for a horse
- ApproveBorrowRequestCommand: The owner approves a pending request
- RejectBorrowRequestCommand: The owner rejects a pending request
- DeleteBorrowRequestCommand: A party (or staff) removes a request

Every transition follows the same order inside one unit of work:
lock the horse row, re-read the request, authorize, run the Conflict
Guard where the transition can make dates unavailable, write, commit.
Events are published only after the commit.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import AuthorizationError, NotFoundError, ValidationError
from shared.domain.value_objects import DateRange
from apps.borrowing.domain.entities import BorrowRequest

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBorrowRequestCommand:
    """
    Command to request a horse for a date range

    ``actor_id`` is the caller identity and becomes the borrower.
    """
    actor_id: Optional[int]
    horse_id: UUID
    start_date: date
    end_date: date
    message: str = ''


@dataclass
class ApproveBorrowRequestCommand:
    """Command for the horse owner to approve a pending request"""
    actor_id: Optional[int]
    request_id: UUID


@dataclass
class RejectBorrowRequestCommand:
    """Command for the horse owner to reject a pending request"""
    actor_id: Optional[int]
    request_id: UUID


@dataclass
class DeleteBorrowRequestCommand:
    """
    Command to delete a request

    Allowed for the request's borrower, the horse owner, and staff
    (administrative override) from any status.
    """
    actor_id: Optional[int]
    request_id: UUID
    actor_is_staff: bool = False


def _require_identity(actor_id):
    if actor_id is None:
        raise AuthorizationError("Sign in to continue.")


def _authorize_owner(horse, request: BorrowRequest, actor_id):
    """
    Only the horse owner decides on a request

    The borrower gets "not permitted"; anyone else gets "not found" so the
    request's existence is not revealed.
    """
    if horse.is_owned_by(actor_id):
        return
    if request.borrower_id == actor_id:
        raise AuthorizationError("Only the horse owner can decide on this request.")
    raise NotFoundError()


# ===== Command Handlers =====

class CreateBorrowRequestHandler:
    """
    Handler for CreateBorrowRequest command

    Pending requests do not constrain each other: the Guard checks the
    proposed range against blocks and approved requests only.
    """

    def __init__(self, horse_repo, request_repo, guard, uow_factory=DjangoUnitOfWork):
        self.horse_repo = horse_repo
        self.request_repo = request_repo
        self.guard = guard
        self.uow_factory = uow_factory

    def handle(self, command: CreateBorrowRequestCommand) -> BorrowRequest:
        """
        Handle request creation

        Returns: Created BorrowRequest aggregate

        Raises:
            AuthorizationError: No caller identity
            ValidationError: Invalid range, inactive horse or own horse
            NotFoundError: Horse does not exist
            ConflictError: Range overlaps a block or an approved booking
        """
        _require_identity(command.actor_id)
        dates = DateRange(command.start_date, command.end_date)

        logger.info(
            f"Creating borrow request for horse {command.horse_id}, "
            f"borrower {command.actor_id}, dates {dates}"
        )

        with self.uow_factory() as uow:
            horse = self.horse_repo.get(command.horse_id, lock=True)

            if not horse.is_active:
                raise ValidationError("This horse is not accepting requests right now.")
            if horse.is_owned_by(command.actor_id):
                raise ValidationError("You cannot request your own horse.")

            self.guard.ensure_allowed(horse.id, dates)

            request = BorrowRequest.submit(horse, command.actor_id, dates, command.message)

            uow.collect_events(request)
            self.request_repo.add(request)

        logger.info(f"Borrow request {request.id} created for horse {horse.id}")
        return request


class ApproveBorrowRequestHandler:
    """
    Handler for ApproveBorrowRequest command

    Strategy:
    1. Start database transaction (atomic)
    2. Lock the horse row (SELECT FOR UPDATE); concurrent approvals for
       the same horse queue up here
    3. Re-read the request under the lock
    4. Check owner and pending status
    5. Run the Conflict Guard excluding this request
    6. Approve, save, collect events, commit
    7. Publish events (after commit)
    8. On PostgreSQL the EXCLUDE constraint rejects any overlap that slips past
    """

    def __init__(self, horse_repo, request_repo, guard, uow_factory=DjangoUnitOfWork):
        self.horse_repo = horse_repo
        self.request_repo = request_repo
        self.guard = guard
        self.uow_factory = uow_factory

    def handle(self, command: ApproveBorrowRequestCommand) -> BorrowRequest:
        _require_identity(command.actor_id)
        logger.info(f"Approving borrow request {command.request_id} by user {command.actor_id}")

        with self.uow_factory() as uow:
            snapshot = self.request_repo.get(command.request_id)
            horse = self.horse_repo.get(snapshot.horse_id, lock=True)
            request = self.request_repo.get(command.request_id, lock=True)

            _authorize_owner(horse, request, command.actor_id)
            request.ensure_pending('approve')

            self.guard.ensure_allowed(horse.id, request.range, exclude_request_id=request.id)

            request.approve(horse.owner_id)

            uow.collect_events(request)
            self.request_repo.save(request)

        logger.info(f"Borrow request {request.id} approved ({request.range})")
        return request


class RejectBorrowRequestHandler:
    """Handler for rejecting a pending request; frees nothing since it never blocked dates"""

    def __init__(self, horse_repo, request_repo, uow_factory=DjangoUnitOfWork):
        self.horse_repo = horse_repo
        self.request_repo = request_repo
        self.uow_factory = uow_factory

    def handle(self, command: RejectBorrowRequestCommand) -> BorrowRequest:
        _require_identity(command.actor_id)
        logger.info(f"Rejecting borrow request {command.request_id} by user {command.actor_id}")

        with self.uow_factory() as uow:
            snapshot = self.request_repo.get(command.request_id)
            horse = self.horse_repo.get(snapshot.horse_id, lock=True)
            request = self.request_repo.get(command.request_id, lock=True)

            _authorize_owner(horse, request, command.actor_id)
            request.reject(horse.owner_id)

            uow.collect_events(request)
            self.request_repo.save(request)

        logger.info(f"Borrow request {request.id} rejected")
        return request


class DeleteBorrowRequestHandler:
    """Handler for deleting a request; an approved range is available again right after commit"""

    def __init__(self, horse_repo, request_repo, uow_factory=DjangoUnitOfWork):
        self.horse_repo = horse_repo
        self.request_repo = request_repo
        self.uow_factory = uow_factory

    def handle(self, command: DeleteBorrowRequestCommand) -> BorrowRequest:
        _require_identity(command.actor_id)
        logger.info(f"Deleting borrow request {command.request_id} by user {command.actor_id}")

        with self.uow_factory() as uow:
            snapshot = self.request_repo.get(command.request_id)
            horse = self.horse_repo.get(snapshot.horse_id, lock=True)
            request = self.request_repo.get(command.request_id, lock=True)

            is_party = request.borrower_id == command.actor_id or horse.is_owned_by(command.actor_id)
            if not (is_party or command.actor_is_staff):
                raise NotFoundError()

            request.mark_deleted(horse.owner_id, deleted_by=command.actor_id)

            uow.collect_events(request)
            self.request_repo.delete(request.id)

        logger.info(
            f"Borrow request {request.id} deleted (was {request.status.value})"
        )
        return request


def build_command_handlers(horse_repo=None, request_repo=None, block_repo=None, uow_factory=DjangoUnitOfWork):
    """Wire the lifecycle handlers to Django repositories unless others are given."""
    from apps.availability.repositories import DjangoBlockedRangeRepository
    from apps.availability.services import AvailabilityAggregator
    from apps.borrowing.guard import ConflictGuard
    from apps.borrowing.repositories import DjangoBorrowRequestRepository
    from apps.horses.repositories import DjangoHorseRepository

    horse_repo = horse_repo or DjangoHorseRepository()
    request_repo = request_repo or DjangoBorrowRequestRepository()
    block_repo = block_repo or DjangoBlockedRangeRepository()
    guard = ConflictGuard(AvailabilityAggregator(block_repo, request_repo))

    return {
        CreateBorrowRequestCommand: CreateBorrowRequestHandler(horse_repo, request_repo, guard, uow_factory),
        ApproveBorrowRequestCommand: ApproveBorrowRequestHandler(horse_repo, request_repo, guard, uow_factory),
        RejectBorrowRequestCommand: RejectBorrowRequestHandler(horse_repo, request_repo, uow_factory),
        DeleteBorrowRequestCommand: DeleteBorrowRequestHandler(horse_repo, request_repo, uow_factory),
    }
