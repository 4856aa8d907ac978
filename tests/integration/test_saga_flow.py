"""End-to-end choreography: cart → order → payment → confirmation → refunds.

HTTP calls go through the assembled application. Between contexts the
events each domain stored are handed to the subscribing handlers in the
receiving domain's context, the way the Engine delivers them from Redis
Streams.
"""

from decimal import Decimal

from notifications.notification import ordering_events as notification_ordering_events
from notifications.notification import payment_events as notification_payment_events
from notifications.notification.notification import NotificationStatus, NotificationType
from notifications.notification.queries import list_notifications_by_type
from ordering.order.order import OrderStatus
from ordering.order.payment_events import PaymentEventsHandler
from ordering.order.queries import get_order
from payments.payment.ordering_events import OrderingPaymentEventHandler
from payments.payment.payment import PaymentStatus
from payments.payment.queries import get_payment_by_order
from protean import current_domain
from shared.events.ordering import OrderCancelled, OrderCreated
from shared.events.payments import PaymentCompleted, PaymentFailed, PaymentRefunded

USER = {"X-User-Id": "user-001", "X-User-Email": "asha@example.com"}

_CONTRACTS = {
    "Ordering.OrderCreated.v1": OrderCreated,
    "Ordering.OrderCancelled.v1": OrderCancelled,
    "Payments.PaymentCompleted.v1": PaymentCompleted,
    "Payments.PaymentFailed.v1": PaymentFailed,
    "Payments.PaymentRefunded.v1": PaymentRefunded,
}

_SUBSCRIBERS = {
    "Ordering.OrderCreated.v1": [
        ("payments", OrderingPaymentEventHandler, "on_order_created"),
        ("notifications", notification_ordering_events.OrderingEventsHandler, "on_order_created"),
    ],
    "Ordering.OrderCancelled.v1": [
        ("notifications", notification_ordering_events.OrderingEventsHandler, "on_order_cancelled"),
    ],
    "Payments.PaymentCompleted.v1": [
        ("ordering", PaymentEventsHandler, "on_payment_completed"),
        ("notifications", notification_payment_events.PaymentEventsHandler, "on_payment_completed"),
    ],
    "Payments.PaymentFailed.v1": [
        ("ordering", PaymentEventsHandler, "on_payment_failed"),
        ("notifications", notification_payment_events.PaymentEventsHandler, "on_payment_failed"),
    ],
    "Payments.PaymentRefunded.v1": [
        ("notifications", notification_payment_events.PaymentEventsHandler, "on_payment_refunded"),
    ],
}


class Relay:
    """Delivers each stored cross-domain event to its subscribers exactly once."""

    def __init__(self, domains):
        self.domains = domains
        self.offsets = {}

    def _pending(self, source, category):
        with self.domains[source].domain_context():
            messages = current_domain.event_store.store.read(category)
        new = messages[self.offsets.get(category, 0) :]
        self.offsets[category] = len(messages)
        return [
            (message.metadata.headers.type, dict(message.data))
            for message in new
            if message.metadata.headers.type in _SUBSCRIBERS
        ]

    def flush(self):
        """Deliver until no context has produced anything new."""
        while True:
            pending = self._pending("ordering", "ordering::order") + self._pending("payments", "payments::payment")
            if not pending:
                return
            for event_type, data in pending:
                for target, handler_cls, method in _SUBSCRIBERS[event_type]:
                    with self.domains[target].domain_context():
                        getattr(handler_cls(), method)(_CONTRACTS[event_type](**data))

    def within(self, name):
        return self.domains[name].domain_context()


def _place_order(client, relay):
    response = client.post("/cart/items", json={"product_id": "prod-001", "quantity": 2}, headers=USER)
    assert response.status_code == 200
    response = client.post("/cart/checkout", json={"shipping_address": "221B Baker Street"}, headers=USER)
    assert response.status_code == 201
    relay.flush()
    return response.json()


def _pay(client, relay, gateway, order_id):
    with relay.within("payments"):
        ref = get_payment_by_order(order_id).gateway_order_ref
    response = client.post(
        "/payments/verify",
        json={
            "order_id": order_id,
            "gateway_order_ref": ref,
            "gateway_payment_ref": "pay_1",
            "signature": gateway.sign(ref, "pay_1"),
        },
    )
    assert response.status_code == 200
    relay.flush()
    return response.json()


class TestCheckoutToPayment:
    def test_order_created_starts_payment_and_confirmation(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        assert Decimal(order["total_amount"]) == Decimal("100.00")

        with relay.within("payments"):
            payment = get_payment_by_order(order["id"])
        assert payment.status == PaymentStatus.PROCESSING
        assert payment.amount == Decimal("100.00")

        with relay.within("notifications"):
            [confirmation] = list_notifications_by_type("user-001", NotificationType.ORDER_CONFIRMATION)
        assert confirmation.notification_status == NotificationStatus.SENT
        assert fakes["email"].sent_emails[0]["to"] == "asha@example.com"

    def test_client_initiate_reuses_event_driven_payment(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        body = {"order_id": order["id"], "amount": "100.00"}

        first = client.post("/payments", json=body, headers=USER).json()
        second = client.post("/payments", json=body, headers=USER).json()

        with relay.within("payments"):
            event_driven = get_payment_by_order(order["id"])
        assert first["id"] == second["id"] == event_driven.id
        assert len(fakes["gateway"].calls_to("create_intent")) == 1

    def test_verified_payment_confirms_order_and_sends_receipt(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        payment = _pay(client, relay, fakes["gateway"], order["id"])

        assert payment["status"] == "COMPLETED"
        with relay.within("ordering"):
            assert get_order(order["id"]).order_status == OrderStatus.CONFIRMED

        with relay.within("notifications"):
            [receipt] = list_notifications_by_type("user-001", NotificationType.PAYMENT_SUCCESS)
        assert receipt.notification_status == NotificationStatus.SENT
        assert receipt.reference_id == payment["id"]

    def test_redelivered_events_change_nothing(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        _pay(client, relay, fakes["gateway"], order["id"])
        sent = len(fakes["email"].sent_emails)

        relay.offsets.clear()
        relay.flush()

        assert len(fakes["email"].sent_emails) == sent
        assert len(fakes["gateway"].calls_to("create_intent")) == 1
        with relay.within("ordering"):
            assert get_order(order["id"]).order_status == OrderStatus.CONFIRMED


class TestRefunds:
    def test_partial_refunds_then_over_refund(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        payment = _pay(client, relay, fakes["gateway"], order["id"])

        first = client.post(f"/payments/{payment['id']}/refund", json={"amount": "40.00"})
        assert first.json()["status"] == "PARTIALLY_REFUNDED"
        second = client.post(f"/payments/{payment['id']}/refund", json={"amount": "60.00"})
        assert second.json()["status"] == "REFUNDED"

        third = client.post(f"/payments/{payment['id']}/refund", json={"amount": "1.00"})
        assert third.status_code == 422

        relay.flush()
        with relay.within("notifications"):
            refunds = list_notifications_by_type("user-001", NotificationType.PAYMENT_REFUNDED)
        assert len(refunds) == 2


class TestUnhappyPaths:
    def test_gateway_failure_leaves_order_pending(self, client, domains, fakes):
        relay = Relay(domains)
        fakes["gateway"].configure(should_succeed=False, failure_reason="Gateway timeout")
        order = _place_order(client, relay)

        with relay.within("payments"):
            assert get_payment_by_order(order["id"]).status == PaymentStatus.FAILED
        with relay.within("ordering"):
            assert get_order(order["id"]).order_status == OrderStatus.PENDING
        with relay.within("notifications"):
            [notice] = list_notifications_by_type("user-001", NotificationType.PAYMENT_FAILED)
        assert "Reason: Gateway timeout" in notice.content

    def test_bad_signature_fails_payment_not_order(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        with relay.within("payments"):
            payment = get_payment_by_order(order["id"])
        response = client.post(
            "/payments/verify",
            json={
                "order_id": order["id"],
                "gateway_order_ref": payment.gateway_order_ref,
                "gateway_payment_ref": "pay_1",
                "signature": "forged",
            },
        )
        assert response.status_code == 400
        relay.flush()

        with relay.within("ordering"):
            assert get_order(order["id"]).order_status == OrderStatus.PENDING
        with relay.within("notifications"):
            assert len(list_notifications_by_type("user-001", NotificationType.PAYMENT_FAILED)) == 1

    def test_cancellation_notifies_customer(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        response = client.put(f"/orders/{order['id']}/cancel", json={"reason": "Found it cheaper"}, headers=USER)
        assert response.status_code == 200
        relay.flush()

        with relay.within("notifications"):
            [notice] = list_notifications_by_type("user-001", NotificationType.ORDER_CANCELLED)
        assert "Reason: Found it cheaper" in notice.content

    def test_cancelled_order_ignores_late_payment(self, client, domains, fakes):
        relay = Relay(domains)
        order = _place_order(client, relay)
        client.put(f"/orders/{order['id']}/cancel", headers=USER)
        relay.flush()
        _pay(client, relay, fakes["gateway"], order["id"])

        with relay.within("ordering"):
            assert get_order(order["id"]).order_status == OrderStatus.CANCELLED
