"""Tests for the Django borrow request and blocked range repositories."""

from __future__ import annotations

from datetime import date
from importlib import import_module
from unittest import mock

from django.apps import apps as django_apps
from django.db import DatabaseError
from django.test import TestCase

from apps.availability.repositories import DjangoBlockedRangeRepository
from apps.availability.services import default_aggregator
from apps.borrowing.domain.entities import RequestStatus
from apps.borrowing.models import BorrowRequest
from apps.borrowing.repositories import DjangoBorrowRequestRepository
from apps.horses.models import Horse
from apps.users.models import User
from shared.domain.exceptions import DependencyError
from shared.domain.value_objects import DateRange


class BorrowRequestRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.borrower = User.objects.create_user(email="rider@example.com", password="RiderPass123")
        self.horse = Horse.objects.create(owner=self.owner, name="Comet")
        self.repo = DjangoBorrowRequestRepository()

    def _row(self, status: str, start: date, end: date) -> BorrowRequest:
        return BorrowRequest.objects.create(
            horse=self.horse,
            borrower=self.borrower,
            status=status,
            start_date=start,
            end_date=end,
        )

    def test_legacy_status_is_read_as_canonical(self) -> None:
        row = self._row("declined", date(2026, 1, 1), date(2026, 1, 2))
        self.assertEqual(self.repo.get(row.id).status, RequestStatus.REJECTED)

    def test_approved_for_horse_ignores_other_statuses(self) -> None:
        approved = self._row("approved", date(2026, 1, 1), date(2026, 1, 2))
        self._row("pending", date(2026, 1, 1), date(2026, 1, 2))
        self._row("rejected", date(2026, 1, 5), date(2026, 1, 6))

        self.assertEqual([item.id for item in self.repo.approved_for_horse(self.horse.id)], [approved.id])
        self.assertEqual(self.repo.approved_for_horse(self.horse.id, exclude_request_id=approved.id), [])

    def test_legacy_approved_row_blocks_its_dates(self) -> None:
        legacy = self._row("accepted", date(2026, 6, 1), date(2026, 6, 5))

        self.assertEqual(self.repo.get(legacy.id).status, RequestStatus.APPROVED)
        self.assertEqual([item.id for item in self.repo.approved_for_horse(self.horse.id)], [legacy.id])
        self.assertTrue(
            default_aggregator().has_conflict(self.horse.id, DateRange(date(2026, 6, 3), date(2026, 6, 4)))
        )

    def test_legacy_statuses_are_rewritten_by_migration(self) -> None:
        migration = import_module("apps.borrowing.migrations.0003_normalize_legacy_statuses")
        accepted = self._row("accepted", date(2026, 7, 1), date(2026, 7, 2))
        declined = self._row("declined", date(2026, 7, 1), date(2026, 7, 2))
        pending = self._row("pending", date(2026, 7, 4), date(2026, 7, 4))

        migration.rewrite_legacy_statuses(django_apps, None)

        accepted.refresh_from_db()
        declined.refresh_from_db()
        pending.refresh_from_db()
        self.assertEqual(accepted.status, "approved")
        self.assertEqual(declined.status, "rejected")
        self.assertEqual(pending.status, "pending")

    def test_aggregator_merges_blocks_and_approved_requests(self) -> None:
        self._row("approved", date(2026, 2, 10), date(2026, 2, 12))
        self.horse.blocked_ranges.create(owner=self.owner, start_date=date(2026, 2, 1), end_date=date(2026, 2, 3))

        ranges = default_aggregator().unavailable_ranges(self.horse.id)

        self.assertEqual([item.kind.value for item in ranges], ["blocked", "booking"])
        self.assertTrue(
            default_aggregator().has_conflict(self.horse.id, DateRange(date(2026, 2, 3), date(2026, 2, 4)))
        )

    def test_store_failure_becomes_dependency_error(self) -> None:
        with mock.patch.object(
            BorrowRequest.objects, "filter", side_effect=DatabaseError("connection reset")
        ):
            with self.assertRaises(DependencyError):
                self.repo.approved_for_horse(self.horse.id)

    def test_block_repository_round_trip(self) -> None:
        repo = DjangoBlockedRangeRepository()
        row = self.horse.blocked_ranges.create(owner=self.owner, start_date=date(2026, 3, 1), end_date=date(2026, 3, 1))

        block = repo.get(row.id)

        self.assertEqual(block.label, "Blocked")
        self.assertTrue(repo.delete(row.id))
        self.assertIsNone(repo.get(row.id))
