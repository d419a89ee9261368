"""Inbound cross-domain event handler — Logistics reacts to Marketplace events.

- OrderConfirmed: open a Pending shipment for the order (once)
- OrderCancelled / OrderRefunded: cancel the shipment while it has not been
  picked up yet
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.marketplace import OrderCancelled, OrderConfirmed, OrderRefunded

from logistics.domain import logistics
from logistics.shipment.assignment import find_shipment
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)

logistics.register_external_event(OrderConfirmed, "Marketplace.OrderConfirmed.v1")
logistics.register_external_event(OrderCancelled, "Marketplace.OrderCancelled.v1")
logistics.register_external_event(OrderRefunded, "Marketplace.OrderRefunded.v1")


@logistics.event_handler(part_of=Shipment, stream_category="marketplace::order")
class MarketplaceOrderEventHandler:
    """Keeps shipments in step with the orders they deliver."""

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        if find_shipment(event.order_id) is not None:
            logger.info("Shipment already exists, skipping", order_id=str(event.order_id))
            return

        shipment = Shipment.open_for_order(
            order_id=event.order_id,
            buyer_id=event.buyer_id,
            seller_ids=json.loads(event.seller_ids) if event.seller_ids else [],
            delivery_address=event.delivery_address,
        )
        current_domain.repository_for(Shipment).add(shipment)
        logger.info("Shipment opened", order_id=str(event.order_id), shipment_id=str(shipment.id))

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        self._cancel(event.order_id, event.reason or "Order cancelled")

    @handle(OrderRefunded)
    def on_order_refunded(self, event: OrderRefunded) -> None:
        self._cancel(event.order_id, "Order refunded")

    def _cancel(self, order_id, reason):
        shipment = find_shipment(order_id)
        if shipment is None:
            logger.debug("No shipment to cancel", order_id=str(order_id))
            return

        if not shipment.is_cancellable:
            logger.warning(
                "Shipment already on its way, leaving it as is",
                order_id=str(order_id),
                status=shipment.status,
            )
            return

        shipment.cancel(reason)
        current_domain.repository_for(Shipment).add(shipment)
