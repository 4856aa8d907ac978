"""Inbound cross-domain event handler — Payments reacts to Ordering events.

Every new order gets a payment initiated for its total. The idempotency key
is derived from the order id, so a redelivered OrderCreated returns the
recorded response instead of creating a second gateway payment.

A payment that fails at the gateway is a business outcome and the message
is acknowledged. Infrastructure errors propagate so the message is
redelivered.

Cross-domain events are imported from shared.events.ordering and registered
as external events via payments.register_external_event().
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.mixins import handle
from shared.config import get_settings
from shared.errors import DuplicatePaymentError
from shared.events.ordering import OrderCreated

from payments.domain import payments
from payments.payment.initiation import initiate_payment
from payments.payment.payment import Payment, PaymentStatus

logger = structlog.get_logger(__name__)

payments.register_external_event(OrderCreated, "Ordering.OrderCreated.v1")


def idempotency_key_for(order_id: str) -> str:
    return f"order-{order_id}"


@payments.event_handler(part_of=Payment, stream_category="ordering::order")
class OrderingPaymentEventHandler:
    """Reacts to Ordering events to start payments."""

    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        order_id = str(event.order_id)
        logger.info("Initiating payment for new order", order_id=order_id)

        try:
            response = initiate_payment(
                order_id=order_id,
                user_id=str(event.user_id),
                amount=event.total_amount,
                currency=event.currency or get_settings().default_currency,
                idempotency_key=idempotency_key_for(order_id),
            )
        except DuplicatePaymentError as exc:
            logger.warning("Payment not initiated for order", order_id=order_id, error=exc.message)
            return
        except ValidationError as exc:
            logger.warning("Payment not initiated for order", order_id=order_id, error=exc.messages)
            return

        if response.status == PaymentStatus.FAILED:
            logger.warning(
                "Payment for order failed at gateway",
                order_id=order_id,
                payment_id=response.id,
                reason=response.failure_reason,
            )
