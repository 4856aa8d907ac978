"""Notification delivery — one attempt to hand a notification to its channel.

``deliver()`` first claims the notification with a conditional status
update: PENDING or RETRYING becomes SENDING only if the row still holds
the status that was read. Exactly one caller wins the claim, so a
notification is never sent twice by overlapping deliveries (a redelivered
NotificationCreated, a sweep pass racing the dispatcher, or two sweepers).

A SENDING row is normally in flight and is left alone. When a worker died
mid-send the row stays SENDING; once it has not moved for
``NOTIFICATION_SENDING_STALE_SECONDS`` it can be claimed again the same
way.

``deliver()`` never raises for a delivery problem: a failed send, an
unresolvable recipient or a timeout all count against the notification's
retry budget.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.config import get_settings

from notifications.channel import get_channel
from notifications.notification.notification import Notification, NotificationStatus
from notifications.recipients import get_directory

logger = structlog.get_logger(__name__)

_CLAIMABLE = {NotificationStatus.PENDING, NotificationStatus.RETRYING}


def stale_cutoff() -> datetime:
    """SENDING rows last touched before this instant are considered abandoned."""
    return datetime.now(UTC) - timedelta(seconds=get_settings().notification_sending_stale_seconds)


def _claim(notification: Notification) -> bool:
    """Atomically move the stored notification to SENDING; True if this caller won."""
    dao = current_domain.repository_for(Notification)._dao
    status = notification.notification_status
    now = datetime.now(UTC)

    if status in _CLAIMABLE:
        claimed = dao.query.filter(id=str(notification.id), status=status.value).update_all(
            status=NotificationStatus.SENDING.value,
            updated_at=now,
        )
        if claimed == 1:
            notification.start_sending()
        return claimed == 1

    if status == NotificationStatus.SENDING:
        claimed = dao.query.filter(
            id=str(notification.id),
            status=NotificationStatus.SENDING.value,
            updated_at__lt=stale_cutoff(),
        ).update_all(updated_at=now)
        if claimed == 1:
            notification.updated_at = now
            logger.warning("Reclaimed stale sending notification", notification_id=str(notification.id))
        return claimed == 1

    return False


def _attempt(notification: Notification) -> tuple[str | None, str | None]:
    """Send once; returns ``(recipient, error)`` where ``error`` is None on success."""
    recipient = notification.recipient
    try:
        recipient = recipient or get_directory().email_for(str(notification.user_id))
        result = get_channel(notification.notification_channel).send(
            to=recipient,
            subject=notification.subject or "",
            body=notification.content,
        )
    except Exception as exc:  # noqa: BLE001 - every delivery failure only counts against the retry budget
        return recipient, str(exc) or type(exc).__name__

    if result.get("status") != "sent":
        return recipient, result.get("error") or "Unknown dispatch error"
    return recipient, None


def deliver(notification_id: str) -> NotificationStatus | None:
    """Claim and attempt delivery of one notification.

    Returns the resulting status, the unchanged status when another caller
    holds the notification, or None when the notification is gone.
    """
    repo = current_domain.repository_for(Notification)
    try:
        notification = repo.get(notification_id)
    except ObjectNotFoundError:
        logger.warning("Notification vanished before delivery", notification_id=notification_id)
        return None

    if not _claim(notification):
        logger.info(
            "Notification not claimed for delivery",
            notification_id=notification_id,
            status=notification.status,
        )
        return notification.notification_status

    recipient, error = _attempt(notification)

    if error is None:
        notification.mark_sent(recipient)
        logger.info("Notification sent", notification_id=notification_id, recipient=recipient)
    else:
        notification.record_failure(error)
        logger.warning(
            "Notification delivery failed",
            notification_id=notification_id,
            retry_count=notification.retry_count,
            status=notification.status,
            error=error,
        )
    repo.add(notification)
    return notification.notification_status
