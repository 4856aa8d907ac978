"""Shipping template — sent when an order is handed off to the carrier."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class OrderShippedPayload(BaseModel):
    order_id: str = ""
    carrier: str = "the carrier"
    tracking_number: str = "N/A"
    estimated_delivery: str = "soon"


class OrderShippedTemplate:
    notification_type = NotificationType.ORDER_SHIPPED
    payload_model = OrderShippedPayload

    @staticmethod
    def render(payload: OrderShippedPayload) -> RenderedMessage:
        return RenderedMessage(
            subject="Your Order Has Shipped!",
            content=(
                f"Great news! Your order {payload.order_id} has shipped.\n\n"
                f"Carrier: {payload.carrier}\n"
                f"Tracking Number: {payload.tracking_number}\n"
                f"Estimated Delivery: {payload.estimated_delivery}\n\n"
                "You can track your package using the tracking number above."
            ),
        )
