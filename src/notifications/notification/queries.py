"""Read-only notification queries."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.errors import NotFoundError

from notifications.notification.notification import Notification, NotificationType


def get_notification(notification_id: str) -> Notification:
    try:
        return current_domain.repository_for(Notification).get(notification_id)
    except ObjectNotFoundError:
        raise NotFoundError(f"Notification not found: {notification_id}") from None


def list_notifications_for_user(user_id: str, page: int = 0, size: int = 20) -> tuple[list[Notification], int]:
    """Return one page of the user's notifications, newest first, and the total count."""
    result = (
        current_domain.repository_for(Notification)
        ._dao.query.filter(user_id=user_id)
        .order_by("-created_at")
        .offset(page * size)
        .limit(size)
        .all()
    )
    return list(result.items), result.total


def list_notifications_by_type(user_id: str, notification_type: NotificationType) -> list[Notification]:
    return list(
        current_domain.repository_for(Notification)
        ._dao.query.filter(user_id=user_id, notification_type=notification_type.value)
        .order_by("-created_at")
        .all()
        .items
    )
