"""Trade completion — command and handler.

Completion touches four products (two deducted, two minted) and the trade
itself. All five writes go through the same Unit of Work.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.trade.trade import Trade

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Trade")
class CompleteTrade:
    trade_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=Trade)
class CompleteTradeHandler:
    @handle(CompleteTrade)
    def complete_trade(self, command):
        repo = current_domain.repository_for(Trade)
        product_repo = current_domain.repository_for(Product)

        trade = repo.get(command.trade_id)
        product_from = product_repo.get(trade.product_from_id)
        product_to = product_repo.get(trade.product_to_id)

        for_receiver, for_initiator = trade.complete(command.actor_id, product_from, product_to)

        for product in (product_from, product_to, for_receiver, for_initiator):
            product_repo.add(product)
        repo.add(trade)

        logger.info(
            "Trade completed",
            trade_id=str(trade.id),
            completed_by=str(command.actor_id),
            product_from_stock=product_from.stock,
            product_to_stock=product_to.stock,
            derived_for_receiver=str(for_receiver.id),
            derived_for_initiator=str(for_initiator.id),
        )
