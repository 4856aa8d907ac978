"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
No business logic — just schema→command→response translation.
"""

from fastapi import APIRouter, Query

from notifications.api.schemas import (
    NotificationPageResponse,
    NotificationResponse,
    SendNotificationRequest,
)
from notifications.notification import queries
from notifications.notification.dispatch import send_notification as send
from notifications.notification.notification import NotificationType

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.post("", status_code=201, response_model=NotificationResponse)
def send_notification(body: SendNotificationRequest) -> NotificationResponse:
    """Create a notification and start delivering it."""
    notification = send(
        user_id=body.user_id,
        notification_type=body.type,
        channel=body.channel,
        recipient=body.recipient,
        subject=body.subject,
        content=body.content,
        reference_id=body.reference_id,
        reference_type=body.reference_type,
        template_data=body.template_data,
    )
    return NotificationResponse.from_notification(notification)


@notification_router.get("/user/{user_id}", response_model=NotificationPageResponse)
def list_user_notifications(
    user_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
    type: NotificationType | None = Query(default=None),
) -> NotificationPageResponse:
    if type is not None:
        items = queries.list_notifications_by_type(user_id, type)
        return NotificationPageResponse(
            items=[NotificationResponse.from_notification(n) for n in items],
            page=0,
            size=len(items),
            total=len(items),
        )

    items, total = queries.list_notifications_for_user(user_id, page=page, size=size)
    return NotificationPageResponse(
        items=[NotificationResponse.from_notification(n) for n in items],
        page=page,
        size=size,
        total=total,
    )


@notification_router.get("/{notification_id}", response_model=NotificationResponse)
def get_notification(notification_id: str) -> NotificationResponse:
    return NotificationResponse.from_notification(queries.get_notification(notification_id))
