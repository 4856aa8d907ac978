"""Inbound cross-domain event handler — Ordering reacts to Payments events.

A completed payment confirms a PENDING order. Redelivered or late events
leave an order that has already moved on untouched. Failed payments are
recorded in the log only; the order stays PENDING so the customer can
retry payment or cancel.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.payments import PaymentCompleted, PaymentFailed

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

ordering.register_external_event(PaymentCompleted, "Payments.PaymentCompleted.v1")
ordering.register_external_event(PaymentFailed, "Payments.PaymentFailed.v1")


@ordering.event_handler(part_of=Order, stream_category="payments::payment")
class PaymentEventsHandler:
    """Reacts to Payments events on behalf of the Order aggregate."""

    @handle(PaymentCompleted)
    def on_payment_completed(self, event: PaymentCompleted) -> None:
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(str(event.order_id))
        except ObjectNotFoundError:
            logger.warning("Payment completed for unknown order", order_id=str(event.order_id))
            return

        if not order.confirm_payment(event.payment_id):
            logger.info(
                "Payment completion ignored, order already moved on",
                order_id=str(event.order_id),
                status=order.status,
            )
            return

        repo.add(order)
        logger.info(
            "Order confirmed after payment",
            order_id=str(event.order_id),
            payment_id=str(event.payment_id),
        )

    @handle(PaymentFailed)
    def on_payment_failed(self, event: PaymentFailed) -> None:
        logger.info(
            "Payment failed for order",
            order_id=str(event.order_id),
            payment_id=str(event.payment_id),
            reason=event.reason,
        )
