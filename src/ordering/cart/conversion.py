"""Cart checkout — converts the user's cart into an order.

Lines are copied 1:1 with the prices captured when they were added; the
catalogue is not consulted again. The command handler only creates the
order; ``checkout()`` clears the cart once ``process()`` has returned,
i.e. after the order's unit of work has committed.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from shared.config import get_settings
from shared.errors import CartEmptyError, TransientInfraError

from ordering.cart.cart import CartRepository
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CheckoutCart:
    user_id = Identifier(required=True)
    shipping = Text(required=True)  # JSON: shipping dict
    notes = String(max_length=1000)
    user_email = String(max_length=255)


@ordering.command_handler(part_of=Order)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        cart = CartRepository().get(str(command.user_id))
        if cart.is_empty:
            raise CartEmptyError("Cannot checkout an empty cart")

        shipping = json.loads(command.shipping) if isinstance(command.shipping, str) else command.shipping
        order = Order.create(
            user_id=command.user_id,
            lines=[
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                }
                for item in cart.items
            ],
            shipping=shipping,
            currency=get_settings().default_currency,
            notes=command.notes,
            user_email=command.user_email,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)


def checkout(user_id: str, shipping: dict, notes: str | None = None, user_email: str | None = None) -> str:
    """Check the cart out and clear it; returns the new order's id."""
    order_id = current_domain.process(
        CheckoutCart(user_id=user_id, shipping=json.dumps(shipping), notes=notes, user_email=user_email),
        asynchronous=False,
    )

    try:
        CartRepository().delete(user_id)
    except TransientInfraError:
        # The order is committed; a stale cart is the lesser failure
        logger.error("Cart could not be cleared after checkout", order_id=order_id, user_id=user_id)

    logger.info("Checkout completed", order_id=order_id, user_id=user_id)
    return order_id
