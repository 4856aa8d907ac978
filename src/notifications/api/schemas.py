"""Pydantic request/response schemas for the Notifications API."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
    ReferenceType,
)


def _aware(value: datetime | None) -> datetime | None:
    # Some providers drop tzinfo; stored values are UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SendNotificationRequest(BaseModel):
    user_id: str = Field(min_length=1)
    type: NotificationType
    channel: NotificationChannel = NotificationChannel.EMAIL
    recipient: str | None = None
    subject: str | None = Field(default=None, max_length=500)
    content: str | None = None
    reference_id: str | None = None
    reference_type: ReferenceType | None = None
    template_data: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-42",
                    "type": "WELCOME",
                    "channel": "EMAIL",
                    "recipient": "asha@example.com",
                    "template_data": {"customer_name": "Asha"},
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class NotificationResponse(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    channel: NotificationChannel
    recipient: str | None
    subject: str | None
    content: str
    status: str
    retry_count: int
    max_retries: int
    error_message: str | None
    reference_id: str | None
    reference_type: str | None
    created_at: datetime
    updated_at: datetime
    sent_at: datetime | None

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=str(notification.id),
            user_id=str(notification.user_id),
            type=NotificationType(notification.notification_type),
            channel=NotificationChannel(notification.channel),
            recipient=notification.recipient,
            subject=notification.subject,
            content=notification.content,
            status=notification.status,
            retry_count=notification.retry_count or 0,
            max_retries=notification.max_retries,
            error_message=notification.error_message,
            reference_id=notification.reference_id,
            reference_type=notification.reference_type,
            created_at=_aware(notification.created_at),
            updated_at=_aware(notification.updated_at),
            sent_at=_aware(notification.sent_at),
        )


class NotificationPageResponse(BaseModel):
    items: list[NotificationResponse]
    page: int
    size: int
    total: int
