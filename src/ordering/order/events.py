"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """A new order was persisted in PENDING status."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    user_email = String(max_length=255)
    items = Text(required=True)  # JSON list of item dicts
    total_amount = Float(required=True)
    currency = String(max_length=3)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """An order was cancelled."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    """A PENDING order was confirmed after its payment completed."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    payment_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to another status."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    forced = Boolean(default=False)
    changed_at = DateTime(required=True)
