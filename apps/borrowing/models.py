"""Persistence for borrow requests."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BorrowRequest(models.Model):
    """A borrower's request to use a horse over an inclusive date range."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    horse = models.ForeignKey(
        "horses.Horse",
        on_delete=models.CASCADE,
        related_name="borrow_requests",
    )
    borrower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="borrow_requests",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    start_date = models.DateField()
    end_date = models.DateField()
    message = models.TextField(_("Message to the owner"), blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    decided_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Borrow request")
        verbose_name_plural = _("Borrow requests")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="borrow_request_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["horse", "status", "start_date"], name="borrow_horse_status_idx"),
            models.Index(fields=["borrower", "status"], name="borrow_borrower_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.horse_id} {self.start_date} - {self.end_date} ({self.status})"
