"""API tests for registration, login and the current profile."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class UserAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "owner@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "owner",
            "username": "Meadow Stables",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["role"], "owner")
        self.assertTrue(User.objects.get(email=payload["email"]).is_owner())

    def test_register_rejects_mismatched_passwords(self) -> None:
        payload = {
            "email": "rider@example.com",
            "password": "StrongPass123",
            "password_confirm": "Different123",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)

    def test_login_with_email(self) -> None:
        User.objects.create_user(email="rider@example.com", password="RiderPass123")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "rider@example.com", "password": "RiderPass123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)

    def test_me_returns_and_updates_profile(self) -> None:
        user = User.objects.create_user(email="rider@example.com", password="RiderPass123")
        self.client.force_authenticate(user)

        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.data["display_name"], "rider")

        update = self.client.patch(reverse("auth:me"), {"username": "Rider Ann", "role": "owner"}, format="json")

        self.assertEqual(update.status_code, status.HTTP_200_OK, update.data)
        user.refresh_from_db()
        self.assertEqual(user.username, "Rider Ann")
        self.assertTrue(user.is_borrower())
