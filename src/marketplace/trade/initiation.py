"""Trade initiation — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.trade.trade import Trade

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Trade")
class InitiateTrade:
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    product_from_id = Identifier(required=True)
    product_to_id = Identifier(required=True)
    quantity_from = Integer(required=True)
    quantity_to = Integer()
    message = Text()


@marketplace.command_handler(part_of=Trade)
class InitiateTradeHandler:
    @handle(InitiateTrade)
    def initiate_trade(self, command):
        product_repo = current_domain.repository_for(Product)
        trade = Trade.initiate(
            product_from=product_repo.get(command.product_from_id),
            product_to=product_repo.get(command.product_to_id),
            seller_from=command.seller_from,
            seller_to=command.seller_to,
            quantity_from=command.quantity_from,
            quantity_to=command.quantity_to,
            message=command.message,
        )
        current_domain.repository_for(Trade).add(trade)
        logger.info(
            "Trade initiated",
            trade_id=str(trade.id),
            seller_from=str(command.seller_from),
            seller_to=str(command.seller_to),
            value_ratio=trade.fairness.value_ratio,
        )
        return str(trade.id)
