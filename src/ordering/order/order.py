"""Order aggregate (CQRS) — the core of the ordering domain.

An order is created in PENDING from explicit items or from a cart at
checkout. Item prices and line totals are frozen at creation; the total is
the sum of the line totals and never changes afterwards.

State Machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING → PROCESSING
    PENDING/CONFIRMED → CANCELLED

DELIVERED and CANCELLED are terminal.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject
from shared.errors import InvalidTransitionError
from shared.money import from_minor_units, line_total, money, to_minor_units

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderConfirmed, OrderCreated, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_cancellable(self) -> bool:
        return self in _CANCELLABLE_STATES

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[self]


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingInfo:
    """Where the order goes, captured when it is placed."""

    address = String(required=True, max_length=500)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """One ordered product with its price frozen at creation."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    line_total = Float(required=True, min_value=0.0)
    position = Integer(default=0)

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "line_total": self.line_total,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping = ValueObject(ShippingInfo)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="INR")
    notes = String(max_length=1000)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, lines, shipping, currency, notes=None, user_email=None):
        """Create a PENDING order with frozen line prices and raise OrderCreated.

        ``lines`` are dicts with ``product_id``, ``product_name``,
        ``quantity`` and ``unit_price``; prices are already resolved.
        """
        if not lines:
            raise ValidationError({"items": ["Order must have at least one item"]})
        for line in lines:
            if line["quantity"] <= 0:
                raise ValidationError({"quantity": [f"Quantity must be positive for product {line['product_id']}"]})

        items = [
            OrderItem(
                product_id=line["product_id"],
                product_name=line["product_name"],
                quantity=line["quantity"],
                unit_price=money(line["unit_price"]),
                line_total=line_total(line["unit_price"], line["quantity"]),
                position=position,
            )
            for position, line in enumerate(lines)
        ]

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            items=items,
            shipping=ShippingInfo(**shipping),
            total_amount=from_minor_units(sum(to_minor_units(item.line_total) for item in items)),
            currency=currency,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                user_id=str(order.user_id),
                user_email=user_email,
                items=json.dumps([item.to_dict() for item in items]),
                total_amount=order.total_amount,
                currency=order.currency,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------
    @property
    def order_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_modifiable(self) -> bool:
        return self.order_status == OrderStatus.PENDING

    @property
    def sorted_items(self) -> list:
        return sorted(self.items, key=lambda item: item.position or 0)

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = self.order_status
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(f"Cannot transition from {current.value} to {target_status.value}")

    def cancel(self, reason=None):
        current = self.order_status
        if not current.is_cancellable:
            raise InvalidTransitionError(f"Order cannot be cancelled. Current status: {current.value}")

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now
        self.raise_(
            OrderCancelled(order_id=str(self.id), user_id=str(self.user_id), reason=reason, cancelled_at=now)
        )

    def transition_to(self, target_status: OrderStatus, force: bool = False) -> OrderStatus:
        """Move to ``target_status``; returns the previous status.

        ``force`` skips the transition table (operator override).
        """
        previous = self.order_status
        if not force:
            self._assert_can_transition(target_status)

        now = datetime.now(UTC)
        if target_status == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            self.cancellation_reason = self.cancellation_reason or "Cancelled by administrator"
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    user_id=str(self.user_id),
                    reason=self.cancellation_reason,
                    cancelled_at=now,
                )
            )

        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=previous.value,
                to_status=target_status.value,
                forced=force,
                changed_at=now,
            )
        )
        return previous

    def confirm_payment(self, payment_id) -> bool:
        """Confirm a PENDING order after its payment completed.

        Returns False, changing nothing, when the order has already moved on.
        """
        if self.order_status != OrderStatus.PENDING:
            return False

        now = datetime.now(UTC)
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = now
        self.raise_(OrderConfirmed(order_id=str(self.id), payment_id=str(payment_id), confirmed_at=now))
        return True
