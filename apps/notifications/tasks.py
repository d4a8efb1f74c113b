"""Celery tasks handing notifications to the external messaging pipeline."""

from __future__ import annotations

import logging

import requests
from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore

from .models import Notification

logger = logging.getLogger(__name__)


@shared_task(name="notifications.dispatch_notification")
def dispatch_notification(notification_id: int) -> dict[str, str]:
    """
    Post one notification to ``NOTIFICATION_WEBHOOK_URL``.

    Without a configured webhook the notification is marked skipped and
    stays readable in the app. Network or HTTP errors mark it failed for
    the reconcile task to retry.
    """
    try:
        notification = Notification.objects.get(pk=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} no longer exists")
        return {"status": "missing"}

    if notification.delivery_status == Notification.DeliveryStatus.DISPATCHED:
        return {"status": "dispatched"}

    webhook_url = getattr(settings, "NOTIFICATION_WEBHOOK_URL", "")
    if not webhook_url:
        notification.mark_skipped()
        logger.debug(f"No webhook configured, notification {notification_id} skipped")
        return {"status": "skipped"}

    try:
        response = requests.post(
            webhook_url,
            json=notification.to_payload(),
            timeout=getattr(settings, "NOTIFICATION_WEBHOOK_TIMEOUT", 5),
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        notification.mark_failed(str(e))
        logger.error(
            f"Delivery of notification {notification_id} failed "
            f"(attempt {notification.delivery_attempts}): {e}"
        )
        return {"status": "failed"}

    notification.mark_dispatched()
    logger.info(f"Notification {notification_id} dispatched to messaging pipeline")
    return {"status": "dispatched"}


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="notifications.redispatch_undelivered_notifications")
def redispatch_undelivered_notifications() -> dict[str, int]:
    """
    Re-enqueue notifications that were never delivered.

    Covers lost enqueues and failed attempts below
    ``NOTIFICATION_MAX_DELIVERY_ATTEMPTS``.

    Returns:
        dict: {"requeued": number of notifications re-enqueued}
    """
    max_attempts = getattr(settings, "NOTIFICATION_MAX_DELIVERY_ATTEMPTS", 5)
    pending_ids = list(
        Notification.objects.filter(
            delivery_status__in=[
                Notification.DeliveryStatus.PENDING,
                Notification.DeliveryStatus.FAILED,
            ],
            delivery_attempts__lt=max_attempts,
        ).values_list("pk", flat=True)[:500]
    )

    requeued = 0
    for notification_id in pending_ids:
        try:
            dispatch_notification.delay(notification_id)
            requeued += 1
        except Exception as e:
            logger.error(f"Error re-enqueuing notification {notification_id}: {e}", exc_info=True)

    if requeued:
        logger.info(f"Re-enqueued {requeued} undelivered notifications")
    return {"requeued": requeued}
