"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains
(Payments initiates a payment for every new order, Notifications tells the
customer). They are registered as external events via
domain.register_external_event() with matching __type__ strings so
Protean's stream deserialization works correctly.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String, Text


class OrderCreated(BaseEvent):
    """A new order was persisted in PENDING status."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    user_email = String(max_length=255)
    items = Text(required=True)  # JSON list of item dicts
    total_amount = Float(required=True)
    currency = String(max_length=3)
    created_at = DateTime(required=True)


class OrderCancelled(BaseEvent):
    """An order was cancelled by its owner or an administrator."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)
