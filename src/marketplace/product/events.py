"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A product went on sale, either listed by a seller or minted by a completed trade."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    category = String(required=True)
    stock = Integer(required=True)
    origin_trade_id = Identifier()
    listed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON list of field names
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDelisted:
    """The seller deleted the listing. The record is kept, flagged as deleted."""

    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    delisted_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class TradeAvailabilityChanged:
    __version__ = 1

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    available_for_trade = Boolean(required=True)
    changed_at = DateTime(required=True)
