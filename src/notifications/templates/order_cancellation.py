"""Order cancellation template — sent when an order is cancelled."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class OrderCancelledPayload(BaseModel):
    order_id: str = ""
    customer_name: str = "Customer"
    reason: str | None = None


class OrderCancellationTemplate:
    notification_type = NotificationType.ORDER_CANCELLED
    payload_model = OrderCancelledPayload

    @staticmethod
    def render(payload: OrderCancelledPayload) -> RenderedMessage:
        reason = f"Reason: {payload.reason}\n\n" if payload.reason else ""
        return RenderedMessage(
            subject=f"Order Cancelled {payload.order_id}",
            content=(
                f"Hi {payload.customer_name},\n\n"
                f"Your order {payload.order_id} has been cancelled.\n\n"
                f"{reason}"
                "If you already paid for this order, the refund will be processed "
                "to your original payment method."
            ),
        )
