"""Order cancellation — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from shared.errors import NotFoundError

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            raise NotFoundError(f"Order not found: {command.order_id}") from None

        # Scoped to the owner: someone else's order is reported as missing
        if str(order.user_id) != str(command.user_id):
            raise NotFoundError(f"Order not found: {command.order_id}")

        order.cancel(reason=command.reason)
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id), user_id=str(command.user_id), reason=command.reason)
        return str(order.id)
