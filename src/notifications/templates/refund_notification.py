"""Refund notification template — sent when a refund is processed."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class PaymentRefundedPayload(BaseModel):
    order_id: str = ""
    amount: str = "0.00"
    currency: str = "INR"
    refunded_amount: str = "0.00"
    fully_refunded: bool = False


class RefundNotificationTemplate:
    notification_type = NotificationType.PAYMENT_REFUNDED
    payload_model = PaymentRefundedPayload

    @staticmethod
    def render(payload: PaymentRefundedPayload) -> RenderedMessage:
        scope = "in full" if payload.fully_refunded else f"(total refunded so far: {payload.refunded_amount})"
        return RenderedMessage(
            subject=f"Refund Processed - {payload.currency} {payload.amount}",
            content=(
                f"A refund of {payload.currency} {payload.amount} has been processed "
                f"for order {payload.order_id} {scope}.\n\n"
                "The refund should appear in your account within 5-10 "
                "business days, depending on your payment provider."
            ),
        )
