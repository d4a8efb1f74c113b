"""API tests for browsing horses."""

from __future__ import annotations

from unittest import mock

from django.db import transaction
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.horses.models import Horse
from apps.horses.repositories import DjangoHorseRepository
from apps.users.models import User
from shared.domain.exceptions import NotFoundError
from shared.infrastructure.queries import lock_queryset_if_possible


class HorseAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.rider = User.objects.create_user(email="rider@example.com", password="RiderPass123")
        self.active = Horse.objects.create(owner=self.owner, name="Comet", breed="Haflinger")
        self.resting = Horse.objects.create(owner=self.owner, name="Dusty", is_active=False)

    def test_browse_lists_active_horses_only(self) -> None:
        self.client.force_authenticate(self.rider)
        response = self.client.get(reverse("horse-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["name"] for item in response.data["results"]], ["Comet"])

    def test_mine_includes_inactive_horses(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("horse-mine"))
        self.assertEqual(response.data["count"], 2)

    def test_search_by_breed(self) -> None:
        self.client.force_authenticate(self.rider)
        response = self.client.get(reverse("horse-list"), {"search": "hafl"})
        self.assertEqual(response.data["count"], 1)


class HorseRepositoryTests(TestCase):
    def test_get_returns_reference(self) -> None:
        owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        horse = Horse.objects.create(owner=owner, name="Comet")

        ref = DjangoHorseRepository().get(horse.id, lock=True)

        self.assertEqual(ref.owner_id, owner.id)
        self.assertTrue(ref.is_owned_by(owner.id))
        self.assertFalse(ref.is_owned_by(None))

    def test_missing_horse_is_not_found(self) -> None:
        from uuid import uuid4

        with self.assertRaises(NotFoundError):
            DjangoHorseRepository().get(uuid4())

    def test_lock_selects_the_horse_row_for_update(self) -> None:
        owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        horse = Horse.objects.create(owner=owner, name="Comet")

        locked = []

        def record(queryset):
            locked.append(lock_queryset_if_possible(queryset))
            return locked[-1]

        with mock.patch("apps.horses.repositories.lock_queryset_if_possible", side_effect=record):
            with transaction.atomic():
                DjangoHorseRepository().get(horse.id, lock=True)
            DjangoHorseRepository().get(horse.id)

        self.assertEqual(len(locked), 1)
        self.assertTrue(locked[0].query.select_for_update)
