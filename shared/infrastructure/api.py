"""
REST framework integration for the domain error taxonomy.

Configured as ``REST_FRAMEWORK['EXCEPTION_HANDLER']``. Domain errors are
rendered as ``{"code": ..., "detail": ...}``; conflicts additionally carry
the conflicting ranges so clients can ask for different dates.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ConflictError, status.HTTP_409_CONFLICT),
    (DependencyError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: DomainError) -> int:
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def domain_error_response(exc: DomainError) -> Response:
    payload = {'code': exc.code, 'detail': exc.detail}
    if isinstance(exc, ConflictError):
        payload['conflicts'] = exc.as_payload()
    return Response(payload, status=status_for(exc))


def domain_exception_handler(exc, context):
    """Map domain errors to HTTP responses, defer everything else to DRF."""
    if isinstance(exc, DomainError):
        view = context.get('view')
        view_name = view.__class__.__name__ if view is not None else 'unknown'
        if isinstance(exc, DependencyError):
            logger.error(
                f"Dependency failure in {view_name}: {exc.detail}",
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.info(f"{view_name} refused request: {exc.code}")
        return domain_error_response(exc)
    return exception_handler(exc, context)
