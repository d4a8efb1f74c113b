"""Horse repository used by the availability and borrowing commands."""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from shared.domain.exceptions import NotFoundError
from shared.infrastructure.errors import store_errors
from shared.infrastructure.queries import lock_queryset_if_possible

from .domain import HorseRef
from .models import Horse

logger = logging.getLogger(__name__)


class DjangoHorseRepository:

    def get(self, horse_id: UUID, lock: bool = False) -> HorseRef:
        """
        Load a horse reference

        With ``lock=True`` the horse row is locked until the surrounding
        transaction ends, which serializes every booking transition on
        the same horse.
        """
        with store_errors(f"loading horse {horse_id}"):
            queryset = Horse.objects.only("id", "owner_id", "is_active", "name")
            if lock:
                queryset = lock_queryset_if_possible(queryset)
            row: Optional[Horse] = queryset.filter(pk=horse_id).first()
        if row is None:
            raise NotFoundError()
        if lock:
            logger.debug(f"Locked horse {horse_id} for booking transition")
        return HorseRef(id=row.id, owner_id=row.owner_id, is_active=row.is_active, name=row.name)
