"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from notifications.domain import notifications


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A notification was stored PENDING and is ready for delivery."""

    __version__ = "v1"

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    notification_type = String(required=True)
    channel = String(required=True)
    created_at = DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationSent:
    __version__ = "v1"

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    channel = String(required=True)
    recipient = String(max_length=255)
    sent_at = DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationFailed:
    """Delivery gave up after the last allowed attempt."""

    __version__ = "v1"

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    channel = String(required=True)
    retry_count = Integer(required=True)
    reason = String(max_length=1000)
    failed_at = DateTime(required=True)
