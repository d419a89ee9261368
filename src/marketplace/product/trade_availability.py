"""Offering a product for barter, and withdrawing it."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.trade.cascade import cancel_trades_referencing
from marketplace.trade.trade import TradeStatus


@marketplace.command(part_of="Product")
class MakeAvailableForTrade:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@marketplace.command(part_of="Product")
class WithdrawFromTrade:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@marketplace.command_handler(part_of=Product)
class TradeAvailabilityHandler:
    @handle(MakeAvailableForTrade)
    def make_available(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.set_trade_availability(True)
        repo.add(product)

    @handle(WithdrawFromTrade)
    def withdraw(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.set_trade_availability(False)
        repo.add(product)

        # Accepted trades keep their claim until completed or the product is deleted
        cancel_trades_referencing(
            product.id,
            statuses=(TradeStatus.PENDING.value,),
            reason="Product removed from trade",
            cancelled_by=command.seller_id,
        )
