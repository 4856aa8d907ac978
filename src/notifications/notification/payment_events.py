"""Inbound cross-domain event handler — Notifications reacts to Payment events.

Listens for PaymentCompleted (receipt), PaymentFailed (retry prompt) and
PaymentRefunded (refund notice). Every refund is its own notice, keyed by
the gateway's refund id.
"""

import structlog
from protean.utils.mixins import handle
from shared.events.payments import PaymentCompleted, PaymentFailed, PaymentRefunded

from notifications.domain import notifications
from notifications.notification.helpers import notify_customer, storefront_link
from notifications.notification.notification import Notification, NotificationType, ReferenceType

logger = structlog.get_logger(__name__)

notifications.register_external_event(PaymentCompleted, "Payments.PaymentCompleted.v1")
notifications.register_external_event(PaymentFailed, "Payments.PaymentFailed.v1")
notifications.register_external_event(PaymentRefunded, "Payments.PaymentRefunded.v1")


def _money(value) -> str:
    return f"{value:.2f}"


@notifications.event_handler(part_of=Notification, stream_category="payments::payment")
class PaymentEventsHandler:
    """Reacts to Payment events to send customer notifications."""

    @handle(PaymentCompleted)
    def on_payment_completed(self, event: PaymentCompleted) -> None:
        payment_id = str(event.payment_id)
        notify_customer(
            f"payment-completed:{payment_id}",
            user_id=str(event.user_id),
            notification_type=NotificationType.PAYMENT_SUCCESS,
            reference_id=payment_id,
            reference_type=ReferenceType.PAYMENT,
            template_data={
                "payment_id": payment_id,
                "order_id": str(event.order_id),
                "amount": _money(event.amount),
                "currency": event.currency,
                "payment_date": event.completed_at.date().isoformat(),
            },
        )

    @handle(PaymentFailed)
    def on_payment_failed(self, event: PaymentFailed) -> None:
        payment_id = str(event.payment_id)
        order_id = str(event.order_id)
        template_data = {
            "order_id": order_id,
            "failure_reason": event.reason,
            "retry_url": storefront_link(f"checkout/{order_id}"),
        }
        if event.amount is not None:
            template_data["amount"] = _money(event.amount)
        if event.currency:
            template_data["currency"] = event.currency

        notify_customer(
            f"payment-failed:{payment_id}",
            user_id=str(event.user_id),
            notification_type=NotificationType.PAYMENT_FAILED,
            reference_id=payment_id,
            reference_type=ReferenceType.PAYMENT,
            template_data=template_data,
        )

    @handle(PaymentRefunded)
    def on_payment_refunded(self, event: PaymentRefunded) -> None:
        if not event.user_id:
            logger.info("PaymentRefunded missing user_id, skipping notification", payment_id=str(event.payment_id))
            return

        notify_customer(
            f"payment-refunded:{event.refund_id}",
            user_id=str(event.user_id),
            notification_type=NotificationType.PAYMENT_REFUNDED,
            reference_id=str(event.payment_id),
            reference_type=ReferenceType.PAYMENT,
            template_data={
                "order_id": str(event.order_id),
                "amount": _money(event.amount),
                "refunded_amount": _money(event.refunded_amount),
                "currency": event.currency or "INR",
                "fully_refunded": event.fully_refunded,
            },
        )
