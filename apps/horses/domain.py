"""
Horse reference

The only horse fields the availability core depends on.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class HorseRef(ValueObject):
    id: UUID
    owner_id: int
    is_active: bool
    name: str = ''

    def is_owned_by(self, user_id) -> bool:
        return user_id is not None and self.owner_id == user_id
