"""Repository mapping blocked-range rows to domain entities."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from shared.domain.value_objects import DateRange
from shared.infrastructure.errors import store_errors

from .domain.blocks import BlockedRange
from .models import BlockedRange as BlockedRangeModel

logger = logging.getLogger(__name__)


def _to_entity(row: BlockedRangeModel) -> BlockedRange:
    return BlockedRange(
        id=row.id,
        created_at=row.created_at,
        horse_id=row.horse_id,
        owner_id=row.owner_id,
        range=DateRange(row.start_date, row.end_date),
        reason=row.reason or None,
    )


class DjangoBlockedRangeRepository:

    def for_horse(self, horse_id: UUID) -> List[BlockedRange]:
        """All blocks of a horse; a block is active from creation until deleted."""
        with store_errors(f"loading blocks of horse {horse_id}"):
            rows = list(
                BlockedRangeModel.objects.filter(horse_id=horse_id).order_by("start_date", "created_at")
            )
        return [_to_entity(row) for row in rows]

    def get(self, block_id: UUID) -> Optional[BlockedRange]:
        with store_errors(f"loading block {block_id}"):
            row = BlockedRangeModel.objects.filter(pk=block_id).first()
        return _to_entity(row) if row else None

    def add(self, block: BlockedRange) -> None:
        with store_errors(f"saving block {block.id}"):
            BlockedRangeModel.objects.create(
                id=block.id,
                horse_id=block.horse_id,
                owner_id=block.owner_id,
                start_date=block.range.start,
                end_date=block.range.end,
                reason=block.reason or "",
                created_at=block.created_at,
            )
        logger.info(f"Block {block.id} added for horse {block.horse_id} ({block.range})")

    def delete(self, block_id: UUID) -> bool:
        with store_errors(f"deleting block {block_id}"):
            deleted, _ = BlockedRangeModel.objects.filter(pk=block_id).delete()
        return bool(deleted)
