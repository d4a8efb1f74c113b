"""Repository mapping borrow request rows to domain aggregates."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from django.utils import timezone

from shared.domain.exceptions import ConflictError, NotFoundError
from shared.domain.value_objects import DateRange
from shared.infrastructure.errors import store_errors
from shared.infrastructure.queries import lock_queryset_if_possible

from .domain.entities import BorrowRequest, RequestStatus
from .models import BorrowRequest as BorrowRequestModel

logger = logging.getLogger(__name__)


def _overlapping_approval(exc) -> ConflictError:
    logger.warning(f"Store refused overlapping approval: {exc}")
    return ConflictError()


def to_entity(row: BorrowRequestModel) -> BorrowRequest:
    return BorrowRequest(
        id=row.id,
        created_at=row.created_at,
        horse_id=row.horse_id,
        borrower_id=row.borrower_id,
        range=DateRange(row.start_date, row.end_date),
        status=RequestStatus.normalize(row.status),
        message=row.message or None,
        decided_at=row.decided_at,
    )


class DjangoBorrowRequestRepository:

    def get(self, request_id: UUID, lock: bool = False) -> BorrowRequest:
        with store_errors(f"loading request {request_id}"):
            queryset = BorrowRequestModel.objects.all()
            if lock:
                queryset = lock_queryset_if_possible(queryset)
            row: Optional[BorrowRequestModel] = queryset.filter(pk=request_id).first()
        if row is None:
            raise NotFoundError()
        return to_entity(row)

    def approved_for_horse(self, horse_id: UUID, exclude_request_id: Optional[UUID] = None) -> List[BorrowRequest]:
        """Approved requests of a horse, the only ones that make it unavailable."""
        with store_errors(f"loading approved requests of horse {horse_id}"):
            queryset = BorrowRequestModel.objects.filter(
                horse_id=horse_id,
                status__in=RequestStatus.APPROVED.spellings,
            )
            if exclude_request_id is not None:
                queryset = queryset.exclude(pk=exclude_request_id)
            rows = list(queryset.order_by("start_date", "created_at"))
        return [to_entity(row) for row in rows]

    def add(self, request: BorrowRequest) -> None:
        with store_errors(f"saving request {request.id}", on_integrity=_overlapping_approval):
            BorrowRequestModel.objects.create(
                id=request.id,
                horse_id=request.horse_id,
                borrower_id=request.borrower_id,
                status=request.status.value,
                start_date=request.range.start,
                end_date=request.range.end,
                message=request.message or "",
                created_at=request.created_at,
                decided_at=request.decided_at,
            )

    def save(self, request: BorrowRequest) -> None:
        """Persist a status decision; dates and parties never change."""
        with store_errors(f"updating request {request.id}", on_integrity=_overlapping_approval):
            updated = BorrowRequestModel.objects.filter(pk=request.id).update(
                status=request.status.value,
                decided_at=request.decided_at,
                updated_at=timezone.now(),
            )
        if not updated:
            raise NotFoundError()

    def delete(self, request_id: UUID) -> bool:
        with store_errors(f"deleting request {request_id}"):
            deleted, _ = BorrowRequestModel.objects.filter(pk=request_id).delete()
        return bool(deleted)
