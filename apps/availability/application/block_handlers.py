"""
Block Command Handlers

Owner-side management of blocked ranges:
- AddBlockCommand: Block a range of days on a horse the caller owns
- DeleteBlockCommand: Remove a block (idempotent)

Blocks do not go through the Conflict Guard. A block may cover days that
already have an approved booking; the overlap is reported back to the
owner and the booking stays approved.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from uuid import UUID
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import AuthorizationError
from shared.domain.value_objects import DateRange
from apps.availability.domain.blocks import BlockedRange
from apps.availability.domain.timeline import UnavailableRange, find_conflicts

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class AddBlockCommand:
    actor_id: Optional[int]
    horse_id: UUID
    start_date: date
    end_date: date
    reason: str = ''


@dataclass
class DeleteBlockCommand:
    actor_id: Optional[int]
    horse_id: UUID
    block_id: UUID


@dataclass
class BlockAdded:
    """Result of AddBlockCommand: the new block and the approved bookings it overlaps."""
    block: BlockedRange
    overlapping_bookings: List[UnavailableRange] = field(default_factory=list)

    @property
    def overlaps_bookings(self) -> bool:
        return bool(self.overlapping_bookings)


def _authorize_horse_owner(horse, actor_id):
    if actor_id is None:
        raise AuthorizationError("Sign in to continue.")
    if not horse.is_owned_by(actor_id):
        raise AuthorizationError("Only the horse owner can manage blocked dates.")


# ===== Command Handlers =====

class AddBlockHandler:

    def __init__(self, horse_repo, block_repo, request_repo, uow_factory=DjangoUnitOfWork):
        self.horse_repo = horse_repo
        self.block_repo = block_repo
        self.request_repo = request_repo
        self.uow_factory = uow_factory

    def handle(self, command: AddBlockCommand) -> BlockAdded:
        if command.actor_id is None:
            raise AuthorizationError("Sign in to continue.")
        dates = DateRange(command.start_date, command.end_date)

        with self.uow_factory():
            # The lock orders this insert against request creation on the same horse
            horse = self.horse_repo.get(command.horse_id, lock=True)
            _authorize_horse_owner(horse, command.actor_id)

            block = BlockedRange(
                horse_id=horse.id,
                owner_id=command.actor_id,
                range=dates,
                reason=(command.reason or '').strip() or None,
            )
            self.block_repo.add(block)

            bookings = [
                request.as_unavailable()
                for request in self.request_repo.approved_for_horse(horse.id)
            ]
            overlapping = find_conflicts(dates, bookings)

        if overlapping:
            logger.info(
                f"Block {block.id} on horse {horse.id} overlaps "
                f"{len(overlapping)} approved booking(s); bookings left unchanged"
            )
        return BlockAdded(block=block, overlapping_bookings=overlapping)


class DeleteBlockHandler:

    def __init__(self, horse_repo, block_repo, uow_factory=DjangoUnitOfWork):
        self.horse_repo = horse_repo
        self.block_repo = block_repo
        self.uow_factory = uow_factory

    def handle(self, command: DeleteBlockCommand) -> bool:
        """
        Delete a block

        Returns False when there was nothing to delete; a missing block is
        not an error.
        """
        with self.uow_factory():
            horse = self.horse_repo.get(command.horse_id, lock=True)
            _authorize_horse_owner(horse, command.actor_id)

            block = self.block_repo.get(command.block_id)
            if block is None or block.horse_id != horse.id:
                logger.debug(f"Block {command.block_id} already absent on horse {horse.id}")
                return False

            deleted = self.block_repo.delete(block.id)

        logger.info(f"Block {command.block_id} deleted from horse {command.horse_id}")
        return deleted


def build_block_handlers(horse_repo=None, block_repo=None, request_repo=None, uow_factory=DjangoUnitOfWork):
    """Wire the block handlers to Django repositories unless others are given."""
    from apps.availability.repositories import DjangoBlockedRangeRepository
    from apps.borrowing.repositories import DjangoBorrowRequestRepository
    from apps.horses.repositories import DjangoHorseRepository

    horse_repo = horse_repo or DjangoHorseRepository()
    block_repo = block_repo or DjangoBlockedRangeRepository()
    request_repo = request_repo or DjangoBorrowRequestRepository()

    return {
        AddBlockCommand: AddBlockHandler(horse_repo, block_repo, request_repo, uow_factory),
        DeleteBlockCommand: DeleteBlockHandler(horse_repo, block_repo, uow_factory),
    }
