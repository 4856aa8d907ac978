"""Order confirmation template — sent when an order is created."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class OrderConfirmationPayload(BaseModel):
    order_id: str = ""
    customer_name: str = "Customer"
    item_count: int = 0
    total_amount: str = "0.00"
    currency: str = "INR"
    shipping_address: str = ""
    tracking_url: str = ""


class OrderConfirmationTemplate:
    notification_type = NotificationType.ORDER_CONFIRMATION
    payload_model = OrderConfirmationPayload

    @staticmethod
    def render(payload: OrderConfirmationPayload) -> RenderedMessage:
        lines = [
            f"Hi {payload.customer_name},\n",
            f"Your order {payload.order_id} has been placed.\n",
            f"Items: {payload.item_count}",
            f"Order Total: {payload.currency} {payload.total_amount}",
        ]
        if payload.shipping_address:
            lines.append(f"Shipping To: {payload.shipping_address}")
        if payload.tracking_url:
            lines.append(f"\nTrack your order at {payload.tracking_url}")
        lines.append("\nThank you for shopping with ShopStream!")
        return RenderedMessage(
            subject=f"Order Confirmed! {payload.order_id}",
            content="\n".join(lines),
        )
