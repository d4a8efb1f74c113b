from .blocks import BlockedRange
from .timeline import (
    AvailabilityTimeline,
    UnavailableKind,
    UnavailableRange,
    find_conflicts,
    has_conflict,
)

__all__ = [
    'AvailabilityTimeline',
    'BlockedRange',
    'UnavailableKind',
    'UnavailableRange',
    'find_conflicts',
    'has_conflict',
]
