"""FastAPI routes for the Ordering domain — carts and orders.

The caller is identified by the ``X-User-Id`` header, passed explicitly
into every command. Routes are plain ``def``: commands block on the
catalogue, the key-value store and the database, so FastAPI runs them in
its threadpool.
"""

import json

from fastapi import APIRouter, Header, Query, Response
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartResponse,
    CheckoutRequest,
    CreateOrderRequest,
    OrderPageResponse,
    OrderResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
)
from ordering.cart.conversion import checkout
from ordering.cart.items import (
    AddToCart,
    ClearCart,
    ManageCartItemsHandler,
    RemoveFromCart,
    UpdateCartQuantity,
)
from ordering.order import queries
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import CreateOrder
from ordering.order.order import OrderStatus
from ordering.order.status import UpdateOrderStatus

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(x_user_id: str = Header()) -> CartResponse:
    """Return the caller's cart, empty if they have none."""
    cart = ManageCartItemsHandler().get_cart(x_user_id)
    return CartResponse.from_cart(cart)


@cart_router.post("/items", response_model=CartResponse)
def add_to_cart(body: AddToCartRequest, x_user_id: str = Header()) -> CartResponse:
    """Add a product to the cart, merging with an existing line."""
    command = AddToCart(user_id=x_user_id, product_id=body.product_id, quantity=body.quantity)
    cart = ManageCartItemsHandler().add_to_cart(command)
    return CartResponse.from_cart(cart)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
def update_cart_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    x_user_id: str = Header(),
) -> CartResponse:
    """Set a line's quantity; zero or less removes it."""
    command = UpdateCartQuantity(user_id=x_user_id, product_id=product_id, quantity=body.quantity)
    cart = ManageCartItemsHandler().update_cart_quantity(command)
    return CartResponse.from_cart(cart)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
def remove_from_cart(product_id: str, x_user_id: str = Header()) -> CartResponse:
    command = RemoveFromCart(user_id=x_user_id, product_id=product_id)
    cart = ManageCartItemsHandler().remove_from_cart(command)
    return CartResponse.from_cart(cart)


@cart_router.delete("", status_code=204)
def clear_cart(x_user_id: str = Header()) -> Response:
    ManageCartItemsHandler().clear_cart(ClearCart(user_id=x_user_id))
    return Response(status_code=204)


@cart_router.post("/checkout", status_code=201, response_model=OrderResponse)
def checkout_cart(
    body: CheckoutRequest,
    x_user_id: str = Header(),
    x_user_email: str | None = Header(default=None),
) -> OrderResponse:
    """Convert the caller's cart into a PENDING order."""
    order_id = checkout(
        user_id=x_user_id,
        shipping=body.to_shipping(),
        notes=body.notes,
        user_email=x_user_email,
    )
    return OrderResponse.from_order(queries.get_order(order_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(
    body: CreateOrderRequest,
    x_user_id: str = Header(),
    x_user_email: str | None = Header(default=None),
) -> OrderResponse:
    """Create an order directly from product ids and quantities."""
    command = CreateOrder(
        user_id=x_user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping=json.dumps(body.to_shipping()),
        notes=body.notes,
        user_email=x_user_email,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(queries.get_order(order_id))


@order_router.get("", response_model=OrderPageResponse)
def list_my_orders(
    x_user_id: str = Header(),
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
) -> OrderPageResponse:
    return OrderPageResponse.from_page(queries.list_orders_for_user(x_user_id, page=page, size=size))


@order_router.get("/status/{status}", response_model=OrderPageResponse)
def list_orders_by_status(
    status: OrderStatus,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
) -> OrderPageResponse:
    return OrderPageResponse.from_page(queries.list_orders_by_status(status, page=page, size=size))


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, x_user_id: str = Header()) -> OrderResponse:
    return OrderResponse.from_order(queries.get_order_for_user(order_id, x_user_id))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: str,
    x_user_id: str = Header(),
    body: CancelOrderRequest | None = None,
) -> OrderResponse:
    command = CancelOrder(order_id=order_id, user_id=x_user_id, reason=body.reason if body else None)
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(queries.get_order(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    """Administrative status change."""
    command = UpdateOrderStatus(order_id=order_id, status=body.status.value, force=body.force)
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(queries.get_order(order_id))
