"""
Borrow request event handlers

Registered on the message bus by ``NotificationsConfig.ready``. They run
after the transition has committed; an exception here is logged by the
bus and never reaches the caller of the transition.
"""

from __future__ import annotations

import logging

from apps.borrowing.domain.events import (
    BorrowRequestApproved,
    BorrowRequestCreated,
    BorrowRequestDeleted,
    BorrowRequestEvent,
    BorrowRequestRejected,
)
from apps.horses.models import Horse

from .models import Notification

logger = logging.getLogger(__name__)


def _horse_name(event: BorrowRequestEvent) -> str:
    name = Horse.objects.filter(pk=event.horse_id).values_list('name', flat=True).first()
    return name or 'your horse'


def _notify(user_id: int, title: str, message: str, event: BorrowRequestEvent) -> Notification:
    notification = Notification.objects.create(
        user_id=user_id,
        title=title,
        message=message,
        event_type=type(event).__name__,
        borrow_request_id=event.request_id,
        horse_id=event.horse_id,
    )
    logger.info(f"Notification {notification.pk} created for user {user_id} ({notification.event_type})")

    try:
        from .tasks import dispatch_notification

        dispatch_notification.delay(notification.pk)
    except Exception as e:
        # The beat reconcile task picks up notifications left pending
        logger.error(f"Could not enqueue notification {notification.pk}: {e}", exc_info=True)
    return notification


def notify_owner_of_new_request(event: BorrowRequestCreated) -> None:
    _notify(
        event.owner_id,
        'New borrow request',
        f"You have a new request for {_horse_name(event)}: {event.dates}.",
        event,
    )


def notify_borrower_of_approval(event: BorrowRequestApproved) -> None:
    _notify(
        event.borrower_id,
        'Request approved',
        f"Your request for {_horse_name(event)} ({event.dates}) was approved.",
        event,
    )


def notify_borrower_of_rejection(event: BorrowRequestRejected) -> None:
    _notify(
        event.borrower_id,
        'Request declined',
        f"Your request for {_horse_name(event)} ({event.dates}) was declined.",
        event,
    )


def notify_parties_of_cancellation(event: BorrowRequestDeleted) -> None:
    """
    Only a deleted approved booking concerns anyone else

    When one party deletes, the other is told. When staff delete, both are.
    """
    if not event.freed_dates:
        return
    recipients = [
        user_id
        for user_id in dict.fromkeys((event.owner_id, event.borrower_id))
        if user_id != event.deleted_by
    ]
    for recipient in recipients:
        _notify(
            recipient,
            'Booking cancelled',
            f"The approved booking for {_horse_name(event)} ({event.dates}) was cancelled.",
            event,
        )


EVENT_HANDLERS = {
    BorrowRequestCreated: [notify_owner_of_new_request],
    BorrowRequestApproved: [notify_borrower_of_approval],
    BorrowRequestRejected: [notify_borrower_of_rejection],
    BorrowRequestDeleted: [notify_parties_of_cancellation],
}
