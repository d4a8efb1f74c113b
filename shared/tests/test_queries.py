"""Tests for the row locking helper used by the repositories."""

from __future__ import annotations

from django.db import transaction
from django.test import TestCase, TransactionTestCase

from apps.horses.models import Horse
from shared.infrastructure.queries import lock_queryset_if_possible


class LockInsideTransactionTests(TestCase):
    def test_rows_are_selected_for_update_inside_atomic(self) -> None:
        with transaction.atomic():
            queryset = lock_queryset_if_possible(Horse.objects.all())

        self.assertTrue(queryset.query.select_for_update)


class LockOutsideTransactionTests(TransactionTestCase):
    def test_queryset_is_unchanged_outside_atomic(self) -> None:
        queryset = Horse.objects.all()

        self.assertIs(lock_queryset_if_possible(queryset), queryset)
        self.assertFalse(queryset.query.select_for_update)
