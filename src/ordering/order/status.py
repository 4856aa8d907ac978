"""Administrative order status update — command and handler.

Transitions go through the order state machine. ``force`` bypasses it for
operators correcting data by hand and is logged as a warning.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain
from shared.errors import NotFoundError

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    force = Boolean(default=False)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            raise NotFoundError(f"Order not found: {command.order_id}") from None

        target = OrderStatus(command.status)
        previous = order.transition_to(target, force=bool(command.force))
        repo.add(order)

        if command.force:
            logger.warning(
                "Order status forced",
                order_id=str(order.id),
                from_status=previous.value,
                to_status=target.value,
            )
        else:
            logger.info(
                "Order status updated",
                order_id=str(order.id),
                from_status=previous.value,
                to_status=target.value,
            )
        return str(order.id)
