"""Tests for the Django unit of work: publish after commit, discard on rollback."""

from __future__ import annotations

from dataclasses import dataclass
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from shared.application import uow as uow_module
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import Aggregate, DomainEvent
from shared.domain.exceptions import DependencyError


@dataclass(kw_only=True)
class SomethingHappened(DomainEvent):
    pass


@dataclass(eq=False)
class Thing(Aggregate):
    name: str = "thing"

    def touch(self):
        self.add_event(SomethingHappened(aggregate_id=self.id))


class DjangoUnitOfWorkTests(TestCase):
    def test_events_are_published_only_after_commit(self) -> None:
        thing = Thing()
        thing.touch()

        with mock.patch.object(uow_module.AbstractUnitOfWork, "_publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                with DjangoUnitOfWork() as uow:
                    uow.collect_events(thing)
                    publish.assert_not_called()

        self.assertEqual(len(callbacks), 1)
        publish.assert_called_once()
        published = publish.call_args.args[0]
        self.assertEqual([type(event) for event in published], [SomethingHappened])
        self.assertEqual(thing.events, [])

    def test_events_are_discarded_on_rollback(self) -> None:
        thing = Thing()
        thing.touch()

        with mock.patch.object(uow_module.AbstractUnitOfWork, "_publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                with self.assertRaises(RuntimeError):
                    with DjangoUnitOfWork() as uow:
                        uow.collect_events(thing)
                        raise RuntimeError("boom")

        self.assertEqual(callbacks, [])
        publish.assert_not_called()

    def test_database_error_inside_block_becomes_dependency_error(self) -> None:
        with self.assertRaises(DependencyError):
            with DjangoUnitOfWork():
                raise DatabaseError("connection lost")
