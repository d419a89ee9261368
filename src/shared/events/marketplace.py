"""Cross-domain event contracts for Marketplace domain events.

These classes define the event shape for consumption by other domains
(e.g., Logistics to open a shipment once an order is confirmed, or
Notifications to tell buyers and sellers about order and trade progress).
They are registered as external events via domain.register_external_event()
with matching __type__ strings so Protean's stream deserialization works.

The source-of-truth events are in src/marketplace/order/events.py and
src/marketplace/trade/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, Integer, String, Text


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderPlaced(BaseEvent):
    """A buyer placed an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of item snapshots
    seller_item_counts = Text(required=True)  # JSON {seller_id: item count}
    amount = Float(required=True)
    payment_method = String(max_length=50)
    placed_at = DateTime(required=True)


class OrderItemsProcessed(BaseEvent):
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    confirmed_item_ids = Text()
    rejected_item_ids = Text()
    reason = String(max_length=500)
    processed_at = DateTime(required=True)


class OrderConfirmed(BaseEvent):
    """Every item has a decision and at least one was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    amount = Float(required=True)
    delivery_address = Text()  # JSON address dict
    confirmed_at = DateTime(required=True)


class OrderRejected(BaseEvent):
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    rejected_by = Identifier(required=True)
    reason = String(max_length=500)
    rejected_at = DateTime(required=True)


class OrderCancelled(BaseEvent):
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


class OrderShipped(BaseEvent):
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    note = String(max_length=500)
    shipped_at = DateTime(required=True)


class OrderDelivered(BaseEvent):
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


class OrderRefunded(BaseEvent):
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    amount = Float(required=True)
    refunded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------
class TradeInitiated(BaseEvent):
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


class TradeUpdated(BaseEvent):
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    quantity_from = Integer(required=True)
    quantity_to = Integer(required=True)
    value_ratio = Float()
    updated_at = DateTime(required=True)


class TradeAccepted(BaseEvent):
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    accepted_at = DateTime(required=True)


class TradeRejected(BaseEvent):
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    reason = String(max_length=500)
    rejected_at = DateTime(required=True)


class TradeCancelled(BaseEvent):
    __version__ = 1

    trade_id = Identifier(required=True)
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


class TradeCompleted(BaseEvent):
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
