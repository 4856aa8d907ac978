"""SendNotification command + dispatcher — the entry point for every message.

The command handler stores the notification PENDING and raises
NotificationCreated. The dispatcher reacts to that event once the
notification is committed: email notifications are delivered, SMS, push
and in-app have no adapter yet and stay PENDING.

A command carrying ``source_event_id`` is deduplicated on it, so a
redelivered event returns the notification it already produced.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from shared.config import get_settings

from notifications.channel import is_supported
from notifications.domain import notifications
from notifications.notification.delivery import deliver
from notifications.notification.events import NotificationCreated
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
    ReferenceType,
)
from notifications.templates import render

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class SendNotification:
    user_id = Identifier(required=True)
    notification_type = String(required=True, choices=NotificationType)
    channel = String(choices=NotificationChannel, default=NotificationChannel.EMAIL.value)
    recipient = String(max_length=255)
    subject = String(max_length=500)
    content = Text()
    reference_id = String(max_length=64)
    reference_type = String(choices=ReferenceType)
    source_event_id = String(max_length=200)
    template_data = Text()  # JSON object


def find_by_source_event(source_event_id: str) -> Notification | None:
    found = (
        current_domain.repository_for(Notification)._dao.query.filter(source_event_id=source_event_id).all().items
    )
    return found[0] if found else None


@notifications.command_handler(part_of=Notification)
class SendNotificationHandler:
    @handle(SendNotification)
    def send_notification(self, command):
        if command.source_event_id:
            existing = find_by_source_event(command.source_event_id)
            if existing is not None:
                logger.info(
                    "Notification already created for event",
                    notification_id=str(existing.id),
                    source_event_id=command.source_event_id,
                )
                return str(existing.id)

        notification_type = NotificationType(command.notification_type)
        subject, content = command.subject, command.content
        if subject is None or content is None:
            rendered = render(notification_type, json.loads(command.template_data or "{}"))
            subject = rendered.subject if subject is None else subject
            content = rendered.content if content is None else content

        notification = Notification.create(
            user_id=command.user_id,
            notification_type=notification_type,
            channel=NotificationChannel(command.channel or NotificationChannel.EMAIL.value),
            subject=subject,
            content=content,
            recipient=command.recipient,
            reference_id=command.reference_id,
            reference_type=ReferenceType(command.reference_type) if command.reference_type else None,
            source_event_id=command.source_event_id,
            max_retries=get_settings().notification_max_retries,
        )
        current_domain.repository_for(Notification).add(notification)

        logger.info(
            "Notification created",
            notification_id=str(notification.id),
            user_id=str(notification.user_id),
            type=notification.notification_type,
            channel=notification.channel,
        )
        return str(notification.id)


@notifications.event_handler(part_of=Notification)
class NotificationDispatcher:
    """Delivers notifications once they are created."""

    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        channel = NotificationChannel(event.channel)
        if not is_supported(channel):
            logger.info(
                "Channel not implemented, notification left pending",
                notification_id=str(event.notification_id),
                channel=channel.value,
            )
            return

        deliver(str(event.notification_id))


def send_notification(
    user_id: str,
    notification_type: NotificationType,
    channel: NotificationChannel = NotificationChannel.EMAIL,
    recipient: str | None = None,
    subject: str | None = None,
    content: str | None = None,
    reference_id: str | None = None,
    reference_type: ReferenceType | None = None,
    source_event_id: str | None = None,
    template_data: dict | None = None,
) -> Notification:
    """Create a notification and return it as it stands after dispatch."""
    notification_id = current_domain.process(
        SendNotification(
            user_id=user_id,
            notification_type=notification_type.value,
            channel=channel.value,
            recipient=recipient,
            subject=subject,
            content=content,
            reference_id=reference_id,
            reference_type=reference_type.value if reference_type else None,
            source_event_id=source_event_id,
            template_data=json.dumps(template_data or {}),
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Notification).get(notification_id)
