"""Payment receipt template — sent when a payment is verified."""

from pydantic import BaseModel

from notifications.notification.notification import NotificationType
from notifications.templates.base import RenderedMessage


class PaymentSuccessPayload(BaseModel):
    payment_id: str = ""
    order_id: str = ""
    customer_name: str = "Customer"
    amount: str = "0.00"
    currency: str = "INR"
    payment_method: str = "Card"
    payment_date: str = ""


class PaymentSuccessTemplate:
    notification_type = NotificationType.PAYMENT_SUCCESS
    payload_model = PaymentSuccessPayload

    @staticmethod
    def render(payload: PaymentSuccessPayload) -> RenderedMessage:
        return RenderedMessage(
            subject="Payment Successful!",
            content=(
                f"Hi {payload.customer_name},\n\n"
                f"Payment of {payload.currency} {payload.amount} has been received "
                f"for order {payload.order_id}.\n\n"
                f"Payment ID: {payload.payment_id}\n"
                f"Method: {payload.payment_method}\n"
                f"Date: {payload.payment_date}\n\n"
                "This is your official payment receipt."
            ),
        )
