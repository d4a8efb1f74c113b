"""
Domain Error Taxonomy

Every failure a transition can report to its caller is one of:
- ValidationError: malformed input, rejected before any store access
- NotFoundError: referenced horse / request / block does not exist
- AuthorizationError: caller lacks the role or ownership for the transition
- ConflictError: the proposed range overlaps existing unavailability
- DependencyError: the store or an external collaborator failed

ConflictError and DependencyError must stay distinct: the first means
"choose other dates", the second means "retry later".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.availability.domain.timeline import UnavailableRange


class DomainError(Exception):
    """Base class for errors raised by the availability and borrowing core."""

    code = 'domain_error'
    default_detail = 'The operation could not be completed.'

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(DomainError, ValueError):
    code = 'invalid'
    default_detail = 'Invalid input.'


class InvalidTransitionError(ValidationError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    code = 'invalid_transition'
    default_detail = 'This request can no longer be changed.'


class NotFoundError(DomainError, LookupError):
    code = 'not_found'
    default_detail = 'This item is no longer available.'


class AuthorizationError(DomainError, PermissionError):
    code = 'not_permitted'
    default_detail = 'You are not permitted to perform this action.'


class ConflictError(DomainError):
    """
    Raised when the Conflict Guard finds overlapping unavailability

    Carries the conflicting ranges so the caller can explain why the dates
    are taken. Only kind, dates and label are exposed.
    """

    code = 'dates_unavailable'
    default_detail = 'Those dates are unavailable. Please choose different dates.'

    def __init__(self, detail: str | None = None, conflicts: Iterable['UnavailableRange'] = ()):
        super().__init__(detail)
        self.conflicts = list(conflicts)

    def as_payload(self) -> list[dict]:
        return [conflict.public_dict() for conflict in self.conflicts]


class DependencyError(DomainError):
    """Raised when the data store or a collaborator could not complete the call."""

    code = 'dependency_unavailable'
    default_detail = 'The service is temporarily unavailable. Please try again.'
