"""Order creation — command and handler.

Each requested product is resolved through the catalogue so the order
carries authoritative names and prices. OrderCreated leaves with the
order's unit of work: dispatched after commit in-process, written to the
outbox in production. Either way a broker hiccup never undoes the order.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from shared.config import get_settings

from ordering.catalogue import get_catalogue
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CreateOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping = Text(required=True)  # JSON: shipping dict
    notes = String(max_length=1000)
    user_email = String(max_length=255)


@ordering.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        requested = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping = json.loads(command.shipping) if isinstance(command.shipping, str) else command.shipping

        catalogue = get_catalogue()
        lines = []
        for item in requested:
            product = catalogue.get_product(item["product_id"])
            lines.append(
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "quantity": item["quantity"],
                    "unit_price": product.price,
                }
            )

        order = Order.create(
            user_id=command.user_id,
            lines=lines,
            shipping=shipping,
            currency=get_settings().default_currency,
            notes=command.notes,
            user_email=command.user_email,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            user_id=str(order.user_id),
            total_amount=order.total_amount,
        )
        return str(order.id)
