"""Inbound cross-domain event handler — Notifications reacts to Order events.

Buyers hear about every status change of their order. Sellers hear about
new orders (with the number of their items in it) and about cancellations.
"""

import json

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import notify
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.marketplace import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderItemsProcessed,
    OrderPlaced,
    OrderRejected,
    OrderShipped,
)

logger = structlog.get_logger(__name__)

notifications.register_external_event(OrderPlaced, "Marketplace.OrderPlaced.v1")
notifications.register_external_event(OrderItemsProcessed, "Marketplace.OrderItemsProcessed.v1")
notifications.register_external_event(OrderConfirmed, "Marketplace.OrderConfirmed.v1")
notifications.register_external_event(OrderRejected, "Marketplace.OrderRejected.v1")
notifications.register_external_event(OrderCancelled, "Marketplace.OrderCancelled.v1")
notifications.register_external_event(OrderShipped, "Marketplace.OrderShipped.v1")
notifications.register_external_event(OrderDelivered, "Marketplace.OrderDelivered.v1")


@notifications.event_handler(part_of=Notification, stream_category="marketplace::order")
class OrderEventsHandler:
    """Reacts to Marketplace order events to notify buyers and sellers."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        order_id = str(event.order_id)
        notify(
            event.buyer_id,
            NotificationType.ORDER_STATUS.value,
            {
                "order_id": order_id,
                "status": "Pending Confirmation",
                "detail": f"Your order #{order_id} has been placed and is awaiting seller confirmation.",
            },
            source_event_type="Marketplace.OrderPlaced.v1",
        )
        for seller_id, item_count in json.loads(event.seller_item_counts).items():
            notify(
                seller_id,
                NotificationType.NEW_ORDER.value,
                {"order_id": order_id, "item_count": item_count},
                source_event_type="Marketplace.OrderPlaced.v1",
            )

    @handle(OrderItemsProcessed)
    def on_order_items_processed(self, event: OrderItemsProcessed) -> None:
        confirmed = json.loads(event.confirmed_item_ids) if event.confirmed_item_ids else []
        rejected = json.loads(event.rejected_item_ids) if event.rejected_item_ids else []
        notify(
            event.buyer_id,
            NotificationType.ORDER_STATUS.value,
            {
                "order_id": str(event.order_id),
                "status": "Items Processed",
                "detail": (
                    f"A seller reviewed your order #{event.order_id}: "
                    f"{len(confirmed)} item(s) confirmed, {len(rejected)} item(s) rejected."
                ),
            },
            source_event_type="Marketplace.OrderItemsProcessed.v1",
        )

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        notify(
            event.buyer_id,
            NotificationType.ORDER_CONFIRMED.value,
            {"order_id": str(event.order_id), "status": "Confirmed"},
            source_event_type="Marketplace.OrderConfirmed.v1",
        )

    @handle(OrderRejected)
    def on_order_rejected(self, event: OrderRejected) -> None:
        notify(
            event.buyer_id,
            NotificationType.ORDER_REJECTED.value,
            {"order_id": str(event.order_id), "status": "Rejected", "reason": event.reason},
            source_event_type="Marketplace.OrderRejected.v1",
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        for seller_id in json.loads(event.seller_ids):
            notify(
                seller_id,
                NotificationType.ORDER_CANCELLED.value,
                {"order_id": str(event.order_id), "status": "Cancelled", "reason": event.reason},
                source_event_type="Marketplace.OrderCancelled.v1",
            )

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        notify(
            event.buyer_id,
            NotificationType.ORDER_STATUS.value,
            {"order_id": str(event.order_id), "status": "Shipped"},
            source_event_type="Marketplace.OrderShipped.v1",
        )

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        notify(
            event.buyer_id,
            NotificationType.ORDER_STATUS.value,
            {"order_id": str(event.order_id), "status": "Delivered"},
            source_event_type="Marketplace.OrderDelivered.v1",
        )
