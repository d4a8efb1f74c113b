"""Notification model.

A notification is created for a user when something happens to a borrow
request they are party to. Recipients read them in the web interface
(polling ``unread_count``); a copy is handed to the external messaging
pipeline through a webhook, tracked by ``delivery_status``.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class DeliveryStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        DISPATCHED = 'dispatched', 'Dispatched'
        SKIPPED = 'skipped', 'Skipped'
        FAILED = 'failed', 'Failed'

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    event_type = models.CharField(max_length=64, blank=True, db_index=True)
    borrow_request_id = models.UUIDField(null=True, blank=True)
    horse_id = models.UUIDField(null=True, blank=True)
    is_read = models.BooleanField(default=False)
    delivery_status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
        db_index=True,
    )
    delivery_attempts = models.PositiveSmallIntegerField(default=0)
    last_error = models.CharField(max_length=500, blank=True)
    dispatched_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
        ]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"

    def to_payload(self) -> dict:
        """Body posted to the messaging webhook."""
        return {
            'notification_id': self.pk,
            'user_id': self.user_id,
            'event_type': self.event_type,
            'title': self.title,
            'message': self.message,
            'borrow_request_id': str(self.borrow_request_id) if self.borrow_request_id else None,
            'horse_id': str(self.horse_id) if self.horse_id else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def mark_dispatched(self) -> None:
        self.delivery_status = self.DeliveryStatus.DISPATCHED
        self.delivery_attempts += 1
        self.dispatched_at = timezone.now()
        self.last_error = ''
        self.save(update_fields=['delivery_status', 'delivery_attempts', 'dispatched_at', 'last_error'])

    def mark_failed(self, error: str) -> None:
        self.delivery_status = self.DeliveryStatus.FAILED
        self.delivery_attempts += 1
        self.last_error = error[:500]
        self.save(update_fields=['delivery_status', 'delivery_attempts', 'last_error'])

    def mark_skipped(self) -> None:
        self.delivery_status = self.DeliveryStatus.SKIPPED
        self.save(update_fields=['delivery_status'])
