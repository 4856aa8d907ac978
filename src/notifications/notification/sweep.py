"""Periodic retry sweep.

The sweep is the only path that picks a RETRYING notification up again,
and the only one that rescues a notification left SENDING by a worker
that died mid-send. Each pass takes at most
``NOTIFICATION_SWEEP_BATCH_SIZE`` notifications, oldest first, and gives
each one delivery attempt; ``deliver()`` claims before sending, so
overlapping sweepers never send the same notification twice.
"""

import threading

import structlog
from protean.utils.globals import current_domain
from shared.config import get_settings

from notifications.notification.delivery import deliver, stale_cutoff
from notifications.notification.notification import Notification, NotificationStatus

logger = structlog.get_logger(__name__)


def due_for_retry(limit: int | None = None) -> list[str]:
    """Ids of RETRYING notifications with budget left and of stale SENDING ones."""
    limit = limit or get_settings().notification_sweep_batch_size
    query = current_domain.repository_for(Notification)._dao.query

    retrying = [
        notification
        for notification in query.filter(status=NotificationStatus.RETRYING.value)
        .order_by("updated_at")
        .limit(limit)
        .all()
        .items
        if notification.retry_count < notification.max_retries
    ]
    stale = (
        query.filter(status=NotificationStatus.SENDING.value, updated_at__lt=stale_cutoff())
        .order_by("updated_at")
        .limit(limit)
        .all()
        .items
    )

    due = sorted(retrying + list(stale), key=lambda notification: notification.updated_at)
    return [str(notification.id) for notification in due[:limit]]


def sweep_retries(limit: int | None = None) -> int:
    """Re-attempt due notifications; returns how many were attempted."""
    notification_ids = due_for_retry(limit)
    if not notification_ids:
        return 0

    outcomes: dict[str, int] = {}
    for notification_id in notification_ids:
        status = deliver(notification_id)
        if status is not None:
            outcomes[status.value] = outcomes.get(status.value, 0) + 1

    logger.info("Notification retry sweep finished", attempted=len(notification_ids), outcomes=outcomes)
    return len(notification_ids)


def run_sweeper(domain, stop: threading.Event, interval_seconds: float) -> None:
    """Sweep every ``interval_seconds`` inside ``domain``'s context until ``stop`` is set."""
    logger.info("Notification retry sweeper started", interval_seconds=interval_seconds)
    with domain.domain_context():
        while not stop.wait(interval_seconds):
            try:
                sweep_retries()
            except Exception:
                # The next pass retries; a failed pass must not end the loop
                logger.exception("Notification retry sweep failed")
    logger.info("Notification retry sweeper stopped")
