"""Tests for paged order queries."""

import json

import pytest
from ordering.order import queries
from ordering.order.creation import CreateOrder
from ordering.order.order import OrderStatus
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from shared.errors import NotFoundError


def _create(user_id):
    return current_domain.process(
        CreateOrder(
            user_id=user_id,
            items=json.dumps([{"product_id": "prod-002", "quantity": 1}]),
            shipping=json.dumps({"address": "1 Main St"}),
        ),
        asynchronous=False,
    )


class TestOrderQueries:
    def test_list_for_user_pages(self, catalogue):
        for _ in range(3):
            _create("user-q-001")
        _create("user-q-002")

        first = queries.list_orders_for_user("user-q-001", page=0, size=2)
        second = queries.list_orders_for_user("user-q-001", page=1, size=2)

        assert first.total == 3
        assert first.pages == 2
        assert len(first.items) == 2
        assert len(second.items) == 1
        assert {o.id for o in first.items}.isdisjoint({o.id for o in second.items})

    def test_list_by_status(self, catalogue):
        a = _create("user-q-003")
        _create("user-q-003")
        current_domain.process(
            UpdateOrderStatus(order_id=a, status=OrderStatus.SHIPPED.value, force=True), asynchronous=False
        )

        page = queries.list_orders_by_status(OrderStatus.SHIPPED, size=100)
        assert a in [str(o.id) for o in page.items]
        assert all(o.order_status == OrderStatus.SHIPPED for o in page.items)

    def test_get_order_for_user_is_scoped(self, catalogue):
        order_id = _create("user-q-004")
        assert str(queries.get_order_for_user(order_id, "user-q-004").id) == order_id
        with pytest.raises(NotFoundError):
            queries.get_order_for_user(order_id, "user-q-005")

    def test_get_missing_order(self):
        with pytest.raises(NotFoundError) as exc:
            queries.get_order("missing")
        assert exc.value.message == "Order not found: missing"
