"""
Store error translation

Repositories wrap their ORM calls with ``store_errors`` so that any
``django.db.DatabaseError`` reaches the application layer as a
``DependencyError``. Integrity violations can be mapped to a different
domain error by passing ``on_integrity``.
"""

from contextlib import contextmanager
import logging

from django.db import DatabaseError, IntegrityError

from shared.domain.exceptions import DependencyError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str, on_integrity=None):
    try:
        yield
    except IntegrityError as exc:
        if on_integrity is None:
            logger.error(f"Integrity failure during {operation}: {exc}", exc_info=True)
            raise DependencyError() from exc
        raise on_integrity(exc) from exc
    except DatabaseError as exc:
        logger.error(f"Store failure during {operation}: {exc}", exc_info=True)
        raise DependencyError() from exc

