"""Persistence for owner-declared blocked ranges."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BlockedRange(models.Model):
    """A span of days (both ends inclusive) during which a horse is not lendable."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    horse = models.ForeignKey(
        "horses.Horse",
        on_delete=models.CASCADE,
        related_name="blocked_ranges",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blocked_ranges",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(_("Reason"), max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        verbose_name = _("Blocked range")
        verbose_name_plural = _("Blocked ranges")
        ordering = ["start_date", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="blocked_range_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["horse", "start_date", "end_date"], name="blocked_horse_dates_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.horse_id}: {self.start_date} - {self.end_date}"
