"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal commands and the Order/Cart models.
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ordering.cart.cart import Cart
from ordering.order.order import Order, OrderStatus
from ordering.order.queries import Page


def _aware(value: datetime | None) -> datetime | None:
    # Stored values are UTC; some providers drop tzinfo
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _amount(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingSchema(BaseModel):
    shipping_address: str = Field(min_length=1)
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip: str | None = None
    shipping_country: str | None = None
    notes: str | None = None

    def to_shipping(self) -> dict:
        return {
            "address": self.shipping_address,
            "city": self.shipping_city,
            "state": self.shipping_state,
            "zip_code": self.shipping_zip,
            "country": self.shipping_country,
        }


class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CheckoutRequest(ShippingSchema):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": "221B Baker Street",
                    "shipping_city": "Mumbai",
                    "shipping_state": "MH",
                    "shipping_zip": "400001",
                    "shipping_country": "India",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(ShippingSchema):
    items: list[OrderItemRequest] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": "221B Baker Street",
                    "shipping_city": "Mumbai",
                    "shipping_country": "India",
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus
    force: bool = False


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    image_url: str | None = None


class CartResponse(BaseModel):
    user_id: str
    items: list[CartItemResponse]
    item_count: int
    total_amount: Decimal
    updated_at: datetime | None = None

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls.model_validate(cart.model_dump())


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: OrderStatus
    total_amount: Decimal
    currency: str
    items: list[OrderItemResponse]
    shipping_address: str
    shipping_city: str | None = None
    shipping_state: str | None = None
    shipping_zip: str | None = None
    shipping_country: str | None = None
    notes: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        shipping = order.shipping
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            status=OrderStatus(order.status),
            total_amount=_amount(order.total_amount),
            currency=order.currency,
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=_amount(item.unit_price),
                    line_total=_amount(item.line_total),
                )
                for item in order.sorted_items
            ],
            shipping_address=shipping.address,
            shipping_city=shipping.city,
            shipping_state=shipping.state,
            shipping_zip=shipping.zip_code,
            shipping_country=shipping.country,
            notes=order.notes,
            cancellation_reason=order.cancellation_reason,
            created_at=_aware(order.created_at),
            updated_at=_aware(order.updated_at),
        )


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    page: int
    size: int
    total: int
    pages: int

    @classmethod
    def from_page(cls, page: Page[Order]) -> "OrderPageResponse":
        return cls(
            items=[OrderResponse.from_order(order) for order in page.items],
            page=page.page,
            size=page.size,
            total=page.total,
            pages=page.pages,
        )
