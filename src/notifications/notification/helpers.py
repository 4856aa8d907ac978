"""Shared helper for notification event handlers.

Every consumer follows the same pattern: render the type's template from
event data and send one email keyed by a business key derived from the
event (``order-created:<order id>``, ``payment-refunded:<refund id>``), so
a redelivered event is absorbed by the dispatcher's dedupe.
"""

from shared.config import get_settings

from notifications.notification.dispatch import send_notification
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
    ReferenceType,
)


def storefront_link(path: str) -> str:
    return f"{get_settings().storefront_url.rstrip('/')}/{path.lstrip('/')}"


def notify_customer(
    source_event_id: str,
    user_id: str,
    notification_type: NotificationType,
    reference_id: str,
    reference_type: ReferenceType,
    template_data: dict,
    recipient: str | None = None,
) -> Notification:
    return send_notification(
        user_id=user_id,
        notification_type=notification_type,
        channel=NotificationChannel.EMAIL,
        recipient=recipient,
        reference_id=reference_id,
        reference_type=reference_type,
        source_event_id=source_event_id,
        template_data=template_data,
    )
