"""Integration tests for the borrow request API."""

from __future__ import annotations

from datetime import date, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availability.models import BlockedRange
from apps.borrowing.models import BorrowRequest
from apps.horses.models import Horse
from apps.notifications.models import Notification
from apps.users.models import User


class BorrowRequestAPITests(APITestCase):
    """Covers creation, approval, rejection, deletion and conflicts."""

    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="OwnerPass123",
            role=User.RoleChoices.OWNER,
        )
        self.borrower = User.objects.create_user(email="rider@example.com", password="RiderPass123")
        self.other = User.objects.create_user(email="second@example.com", password="SecondPass123")
        self.stranger = User.objects.create_user(email="stranger@example.com", password="StrangerPass123")
        self.horse = Horse.objects.create(owner=self.owner, name="Comet")
        self.list_url = reverse("borrow-request-list")
        self.start = date.today() + timedelta(days=5)

    def _payload(self, start: date, end: date) -> dict[str, str]:
        return {
            "horse": str(self.horse.id),
            "start_date": str(start),
            "end_date": str(end),
            "message": "Weekend trail ride",
        }

    def _create(self, user, start: date, end: date):
        self.client.force_authenticate(user)
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(self.list_url, self._payload(start, end), format="json")

    def _decide(self, user, request_id, decision: str):
        self.client.force_authenticate(user)
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(reverse(f"borrow-request-{decision}", args=[request_id]))

    def test_borrower_creates_pending_request_and_owner_is_notified(self) -> None:
        response = self._create(self.borrower, self.start, self.start + timedelta(days=2))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["days"], 3)
        self.assertEqual(response.data["owner"], self.owner.id)
        notification = Notification.objects.get(user=self.owner)
        self.assertEqual(notification.event_type, "BorrowRequestCreated")
        self.assertEqual(notification.delivery_status, Notification.DeliveryStatus.SKIPPED)

    def test_owner_approves_and_borrower_is_notified(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start + timedelta(days=1)).data["id"]

        response = self._decide(self.owner, request_id, "approve")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "approved")
        self.assertIsNotNone(response.data["decided_at"])
        self.assertTrue(
            Notification.objects.filter(user=self.borrower, event_type="BorrowRequestApproved").exists()
        )

    def test_overlapping_request_after_approval_conflicts(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start + timedelta(days=3)).data["id"]
        self._decide(self.owner, request_id, "approve")

        response = self._create(self.other, self.start + timedelta(days=3), self.start + timedelta(days=6))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "dates_unavailable")
        self.assertEqual(response.data["conflicts"][0]["kind"], "booking")
        self.assertNotIn("source_id", response.data["conflicts"][0])
        self.assertEqual(BorrowRequest.objects.count(), 1)

    def test_back_to_back_requests_are_allowed(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start + timedelta(days=2)).data["id"]
        self._decide(self.owner, request_id, "approve")

        response = self._create(self.other, self.start + timedelta(days=3), self.start + timedelta(days=4))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_blocked_dates_refuse_new_requests(self) -> None:
        BlockedRange.objects.create(
            horse=self.horse,
            owner=self.owner,
            start_date=self.start,
            end_date=self.start,
            reason="Farrier",
        )

        response = self._create(self.borrower, self.start - timedelta(days=1), self.start)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["conflicts"][0]["label"], "Farrier")

    def test_second_overlapping_approval_conflicts_and_stays_pending(self) -> None:
        first = self._create(self.borrower, self.start, self.start + timedelta(days=4)).data["id"]
        second = self._create(self.other, self.start + timedelta(days=2), self.start + timedelta(days=6)).data["id"]

        self.assertEqual(self._decide(self.owner, first, "approve").status_code, status.HTTP_200_OK)
        response = self._decide(self.owner, second, "approve")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(BorrowRequest.objects.get(pk=second).status, BorrowRequest.Status.PENDING)

    def test_reject_then_reapprove_is_invalid(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start).data["id"]

        self.assertEqual(self._decide(self.owner, request_id, "reject").status_code, status.HTTP_200_OK)
        response = self._decide(self.owner, request_id, "approve")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_transition")

    def test_borrower_cannot_approve(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start).data["id"]
        response = self._decide(self.borrower, request_id, "approve")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_stranger_gets_not_found(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start).data["id"]

        self.client.force_authenticate(self.stranger)
        detail = self.client.get(reverse("borrow-request-detail", args=[request_id]))
        approve = self._decide(self.stranger, request_id, "approve")

        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(approve.status_code, status.HTTP_404_NOT_FOUND)

    def test_owner_cannot_request_own_horse(self) -> None:
        response = self._create(self.owner, self.start, self.start)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_deleting_approved_request_frees_dates_and_notifies_owner(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start + timedelta(days=2)).data["id"]
        self._decide(self.owner, request_id, "approve")

        self.client.force_authenticate(self.borrower)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.delete(reverse("borrow-request-detail", args=[request_id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(BorrowRequest.objects.filter(pk=request_id).exists())
        self.assertTrue(
            Notification.objects.filter(user=self.owner, event_type="BorrowRequestDeleted").exists()
        )
        retry = self._create(self.other, self.start, self.start + timedelta(days=2))
        self.assertEqual(retry.status_code, status.HTTP_201_CREATED, retry.data)

    def test_list_filters_by_role_and_legacy_status(self) -> None:
        request_id = self._create(self.borrower, self.start, self.start).data["id"]
        self._decide(self.owner, request_id, "reject")
        self._create(self.other, self.start + timedelta(days=10), self.start + timedelta(days=10))

        self.client.force_authenticate(self.owner)
        owned = self.client.get(self.list_url, {"role": "owner"})
        declined = self.client.get(self.list_url, {"status": "declined"})

        self.client.force_authenticate(self.borrower)
        mine = self.client.get(self.list_url)

        self.assertEqual(owned.data["count"], 2)
        self.assertEqual([item["id"] for item in declined.data["results"]], [request_id])
        self.assertEqual(mine.data["count"], 1)

    def test_legacy_accepted_booking_still_blocks_its_dates(self) -> None:
        legacy = BorrowRequest.objects.create(
            horse=self.horse,
            borrower=self.other,
            status="accepted",
            start_date=self.start,
            end_date=self.start + timedelta(days=4),
        )
        response = self._create(self.borrower, self.start + timedelta(days=2), self.start + timedelta(days=3))

        self.client.force_authenticate(self.owner)
        listed = self.client.get(self.list_url, {"status": "approved"})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual([item["id"] for item in listed.data["results"]], [str(legacy.id)])
        self.assertEqual(listed.data["results"][0]["status"], "approved")

    def test_owner_summary(self) -> None:
        request_id = self._create(self.borrower, timezone.localdate(), timezone.localdate() + timedelta(days=1)).data["id"]
        self._decide(self.owner, request_id, "approve")
        self._create(self.other, self.start + timedelta(days=10), self.start + timedelta(days=11))

        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("borrow-request-owner-summary"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_horses"], 1)
        self.assertEqual(response.data["pending_requests"], 1)
        self.assertEqual(response.data["approved_requests"], 1)
        self.assertEqual(response.data["active_borrows"], 1)
        self.assertEqual(len(response.data["recent_requests"]), 2)

    def test_anonymous_requests_are_refused(self) -> None:
        response = self.client.post(self.list_url, self._payload(self.start, self.start), format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
