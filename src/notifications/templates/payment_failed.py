"""Payment failure template — asks the customer to retry checkout."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class PaymentFailedPayload(BaseModel):
    order_id: str = ""
    customer_name: str = "Customer"
    amount: str = "0.00"
    currency: str = "INR"
    failure_reason: str = "Payment could not be completed"
    retry_url: str = ""


class PaymentFailedTemplate:
    notification_type = NotificationType.PAYMENT_FAILED
    payload_model = PaymentFailedPayload

    @staticmethod
    def render(payload: PaymentFailedPayload) -> RenderedMessage:
        retry = f"\n\nYou can retry the payment at {payload.retry_url}" if payload.retry_url else ""
        return RenderedMessage(
            subject="Payment Failed - Action Required",
            content=(
                f"Hi {payload.customer_name},\n\n"
                f"We could not process your payment of {payload.currency} {payload.amount} "
                f"for order {payload.order_id}.\n\n"
                f"Reason: {payload.failure_reason}"
                f"{retry}"
            ),
        )
