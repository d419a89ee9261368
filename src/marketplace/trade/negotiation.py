"""Trade negotiation — update, accept, reject and cancel a pending offer."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.trade.trade import Trade


@marketplace.command(part_of="Trade")
class UpdateTrade:
    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    quantity_from = Integer()
    quantity_to = Integer()
    message = Text()


@marketplace.command(part_of="Trade")
class AcceptTrade:
    trade_id = Identifier(required=True)
    seller_to = Identifier(required=True)


@marketplace.command(part_of="Trade")
class RejectTrade:
    trade_id = Identifier(required=True)
    seller_to = Identifier(required=True)
    reason = String(max_length=500)


@marketplace.command(part_of="Trade")
class CancelTrade:
    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    reason = String(max_length=500)


@marketplace.command_handler(part_of=Trade)
class TradeNegotiationHandler:
    @handle(UpdateTrade)
    def update_trade(self, command):
        repo = current_domain.repository_for(Trade)
        product_repo = current_domain.repository_for(Product)
        trade = repo.get(command.trade_id)
        trade.revise(
            command.seller_from,
            product_from=product_repo.get(trade.product_from_id),
            product_to=product_repo.get(trade.product_to_id),
            quantity_from=command.quantity_from,
            quantity_to=command.quantity_to,
            message=command.message,
        )
        repo.add(trade)

    @handle(AcceptTrade)
    def accept_trade(self, command):
        repo = current_domain.repository_for(Trade)
        trade = repo.get(command.trade_id)
        trade.accept(command.seller_to, current_domain.repository_for(Product).get(trade.product_from_id))
        repo.add(trade)

    @handle(RejectTrade)
    def reject_trade(self, command):
        repo = current_domain.repository_for(Trade)
        trade = repo.get(command.trade_id)
        trade.reject(command.seller_to, reason=command.reason)
        repo.add(trade)

    @handle(CancelTrade)
    def cancel_trade(self, command):
        repo = current_domain.repository_for(Trade)
        trade = repo.get(command.trade_id)
        trade.cancel(command.seller_from, reason=command.reason)
        repo.add(trade)
