"""Application tests for PaymentEventsHandler — Ordering reacts to Payments events."""

import json
from datetime import UTC, datetime

from ordering.order.creation import CreateOrder
from ordering.order.order import OrderStatus
from ordering.order.payment_events import PaymentEventsHandler
from ordering.order.queries import get_order
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from shared.events.payments import PaymentCompleted, PaymentFailed


def _create():
    return current_domain.process(
        CreateOrder(
            user_id="user-001",
            items=json.dumps([{"product_id": "prod-001", "quantity": 1}]),
            shipping=json.dumps({"address": "1 Main St"}),
        ),
        asynchronous=False,
    )


def _completed(order_id):
    return PaymentCompleted(
        payment_id="pay-1",
        order_id=order_id,
        user_id="user-001",
        amount=50.0,
        currency="INR",
        completed_at=datetime.now(UTC),
    )


class TestPaymentCompleted:
    def test_confirms_pending_order(self, catalogue):
        order_id = _create()
        PaymentEventsHandler().on_payment_completed(_completed(order_id))
        assert get_order(order_id).order_status == OrderStatus.CONFIRMED

    def test_redelivery_is_idempotent(self, catalogue):
        order_id = _create()
        handler = PaymentEventsHandler()
        handler.on_payment_completed(_completed(order_id))
        handler.on_payment_completed(_completed(order_id))

        assert get_order(order_id).order_status == OrderStatus.CONFIRMED
        messages = current_domain.event_store.store.read(f"ordering::order-{order_id}")
        confirmed = [m for m in messages if m.metadata.headers.type == "Ordering.OrderConfirmed.v1"]
        assert len(confirmed) == 1

    def test_cancelled_order_stays_cancelled(self, catalogue):
        order_id = _create()
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, status=OrderStatus.CANCELLED.value), asynchronous=False
        )
        PaymentEventsHandler().on_payment_completed(_completed(order_id))
        assert get_order(order_id).order_status == OrderStatus.CANCELLED

    def test_unknown_order_is_acknowledged(self):
        PaymentEventsHandler().on_payment_completed(_completed("missing"))


class TestPaymentFailed:
    def test_order_stays_pending(self, catalogue):
        order_id = _create()
        PaymentEventsHandler().on_payment_failed(
            PaymentFailed(
                payment_id="pay-1",
                order_id=order_id,
                user_id="user-001",
                amount=50.0,
                currency="INR",
                reason="Card declined",
                failed_at=datetime.now(UTC),
            )
        )
        assert get_order(order_id).order_status == OrderStatus.PENDING
