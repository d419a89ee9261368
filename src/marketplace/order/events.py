"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A buyer placed an order. Stock for every line is already set aside."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of item snapshots
    seller_item_counts = Text(required=True)  # JSON {seller_id: item count}
    amount = Float(required=True)
    payment_method = String(max_length=50)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderItemsProcessed:
    """One seller decided some of their items."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    confirmed_item_ids = Text()
    rejected_item_ids = Text()
    reason = String(max_length=500)
    processed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    amount = Float(required=True)
    delivery_address = Text()
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderRejected:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    rejected_by = Identifier(required=True)
    reason = String(max_length=500)
    rejected_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderProcessing:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    note = String(max_length=500)
    started_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    note = String(max_length=500)
    shipped_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class RefundRequested:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    reason = String(max_length=500)
    amount = Float(required=True)
    requested_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class RefundRejected:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    note = String(max_length=500)
    resolved_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text(required=True)
    amount = Float(required=True)
    refunded_at = DateTime(required=True)
