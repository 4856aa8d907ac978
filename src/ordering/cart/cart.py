"""Shopping cart — a per-user document kept in the key-value store.

A cart is created lazily: reading a missing cart returns an empty one that
is only persisted by the first mutation. Every save refreshes the TTL, so
an idle cart expires on its own. At most one line exists per product;
adding a product already in the cart increases that line's quantity.

Prices are snapshots taken from the catalogue when the line was added.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import structlog
from pydantic import BaseModel, Field, ValidationError, computed_field
from shared.config import get_settings
from shared.kv import get_store
from shared.kv.port import KeyValueStore

logger = structlog.get_logger(__name__)

CART_PREFIX = "cart:"


class CartItem(BaseModel):
    product_id: str
    product_name: str
    quantity: int = Field(gt=0)
    unit_price: Decimal
    image_url: str | None = None

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart(BaseModel):
    user_id: str
    items: list[CartItem] = Field(default_factory=list)
    updated_at: datetime | None = None

    @computed_field
    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @computed_field
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str) -> CartItem | None:
        return next((item for item in self.items if item.product_id == product_id), None)

    def add_item(self, item: CartItem) -> None:
        existing = self.find(item.product_id)
        if existing is not None:
            existing.quantity += item.quantity
        else:
            self.items.append(item)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity. Zero or less removes the line; unknown products are ignored."""
        if quantity <= 0:
            self.remove_item(product_id)
            return
        existing = self.find(product_id)
        if existing is not None:
            existing.quantity = quantity

    def remove_item(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]


class CartRepository:
    """Loads and saves carts under ``cart:<user_id>`` with a sliding TTL."""

    def __init__(self, store: KeyValueStore | None = None, ttl: timedelta | None = None) -> None:
        self.store = store or get_store()
        self.ttl = ttl or timedelta(days=get_settings().cart_ttl_days)

    @staticmethod
    def key_for(user_id: str) -> str:
        return f"{CART_PREFIX}{user_id}"

    def get(self, user_id: str) -> Cart:
        raw = self.store.get(self.key_for(user_id))
        if raw is None:
            return Cart(user_id=user_id)
        try:
            return Cart.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding unreadable cart", user_id=user_id, error=str(exc))
            return Cart(user_id=user_id)

    def save(self, cart: Cart) -> None:
        cart.updated_at = datetime.now(UTC)
        self.store.put(self.key_for(cart.user_id), cart.model_dump_json(), self.ttl)

    def delete(self, user_id: str) -> None:
        self.store.evict(self.key_for(user_id))
