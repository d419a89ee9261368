"""Order cancellation by the buyer — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.product.stock import release_units

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    reason = String(max_length=500)


@marketplace.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        released = order.cancel(command.buyer_id, reason=command.reason)
        release_units(released)
        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), restored_lines=len(released))


def cancellation_window(order_id, buyer_id):
    """Cancellation window of an order, as seen by its buyer."""
    order = current_domain.repository_for(Order).get(order_id)
    order.assert_visible_to(buyer_id)
    return order.cancellation_window()
