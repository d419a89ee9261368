"""Domain events for the Trade aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Trade")
class TradeInitiated:
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    product_from_id = Identifier(required=True)
    product_to_id = Identifier(required=True)
    product_from_name = String()
    product_to_name = String()
    quantity_from = Integer(required=True)
    quantity_to = Integer(required=True)
    value_ratio = Float()
    initiated_at = DateTime(required=True)


@marketplace.event(part_of="Trade")
class TradeUpdated:
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    quantity_from = Integer(required=True)
    quantity_to = Integer(required=True)
    value_ratio = Float()
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Trade")
class TradeAccepted:
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    accepted_at = DateTime(required=True)


@marketplace.event(part_of="Trade")
class TradeRejected:
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    reason = String(max_length=500)
    rejected_at = DateTime(required=True)


@marketplace.event(part_of="Trade")
class TradeCancelled:
    """A trade was withdrawn by its initiator, or force-cancelled because a product left the market."""

    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Trade")
class TradeCompleted:
    """Both sides were deducted and two derived products were minted."""

    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    completed_by = Identifier(required=True)
    product_from_id = Identifier(required=True)
    product_to_id = Identifier(required=True)
    quantity_from = Integer(required=True)
    quantity_to = Integer(required=True)
    derived_product_for_receiver_id = Identifier(required=True)
    derived_product_for_initiator_id = Identifier(required=True)
    completed_at = DateTime(required=True)
