"""
Unit of Work Pattern

Manages database transactions and ensures that domain events
are published only after successful transaction commit.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import DatabaseError, transaction

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DependencyError

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """
    Abstract Unit of Work pattern

    Implementations provide the transaction; event collection is shared.
    A transition that needs the per-horse serialization point calls
    the horse repository with ``lock=True`` inside the unit of work.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        if hasattr(aggregate, 'events'):
            new_events = aggregate.events
            if new_events:
                self._events.extend(new_events)
                aggregate.clear_events()
                logger.debug(
                    f"Collected {len(new_events)} events from "
                    f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
                )

    def _take_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events

    @staticmethod
    def _publish_events(events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit. Handler failures are
        logged by the bus and never reach the caller of the transition.
        """
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")

        try:
            message_bus.publish_events(events)
        except Exception as e:
            logger.error(f"Error publishing events: {e}", exc_info=True)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Manages Django database transactions and ensures domain events
    are published after successful commit.

    Usage:
        with DjangoUnitOfWork() as uow:
            # Serialize against other transitions on the horse
            horse = horse_repo.get(horse_id, lock=True)

            # Re-read and execute domain logic
            request = request_repo.get(request_id, lock=True)
            guard.ensure_allowed(horse.id, request.range, exclude_request_id=request.id)
            request.approve(actor_id)

            # Collect events and save changes
            uow.collect_events(request)
            request_repo.save(request)

            # Transaction commits here
        # Events are published after commit

    Database failures raised while the block runs or while committing are
    re-raised as DependencyError.
    """

    def __init__(self):
        super().__init__()
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        try:
            self._transaction.__enter__()
        except DatabaseError as exc:
            logger.error(f"Could not open transaction: {exc}", exc_info=True)
            raise DependencyError() from exc
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                try:
                    self._transaction.__exit__(exc_type, exc_val, exc_tb)
                except DatabaseError as exc:
                    if exc_type is not None:
                        raise
                    logger.error(f"Transaction commit failed: {exc}", exc_info=True)
                    raise DependencyError() from exc
        if exc_type is not None and issubclass(exc_type, DatabaseError):
            logger.error(f"Store failure inside unit of work: {exc_val}", exc_info=exc_val)
            raise DependencyError() from exc_val
        return False

    def commit(self):
        """
        Commit changes and publish events

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._take_events()

        # Schedule event publishing after commit
        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Rollback changes and discard events"""
        if self._events:
            logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()
