"""Inbound cross-domain event handler — Notifications reacts to Order events.

Listens for OrderCreated (confirmation) and OrderCancelled (cancellation
notice).

Cross-domain events are imported from shared.events.ordering and registered
as external events via notifications.register_external_event().
"""

import json

import structlog
from protean.utils.mixins import handle
from shared.events.ordering import OrderCancelled, OrderCreated

from notifications.domain import notifications
from notifications.notification.helpers import notify_customer, storefront_link
from notifications.notification.notification import Notification, NotificationType, ReferenceType

logger = structlog.get_logger(__name__)

notifications.register_external_event(OrderCreated, "Ordering.OrderCreated.v1")
notifications.register_external_event(OrderCancelled, "Ordering.OrderCancelled.v1")


@notifications.event_handler(part_of=Notification, stream_category="ordering::order")
class OrderingEventsHandler:
    """Reacts to Ordering events to send customer notifications."""

    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        order_id = str(event.order_id)
        items = json.loads(event.items) if isinstance(event.items, str) else event.items
        notification = notify_customer(
            f"order-created:{order_id}",
            user_id=str(event.user_id),
            notification_type=NotificationType.ORDER_CONFIRMATION,
            reference_id=order_id,
            reference_type=ReferenceType.ORDER,
            recipient=event.user_email,
            template_data={
                "order_id": order_id,
                "item_count": len(items or []),
                "total_amount": f"{event.total_amount:.2f}",
                "currency": event.currency or "INR",
                "tracking_url": storefront_link(f"orders/{order_id}"),
            },
        )
        logger.info("Order confirmation queued", order_id=order_id, notification_id=str(notification.id))

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        order_id = str(event.order_id)
        notify_customer(
            f"order-cancelled:{order_id}",
            user_id=str(event.user_id),
            notification_type=NotificationType.ORDER_CANCELLED,
            reference_id=order_id,
            reference_type=ReferenceType.ORDER,
            template_data={"order_id": order_id, "reason": event.reason},
        )
