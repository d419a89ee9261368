"""Inbound cross-domain event handler — Marketplace reacts to Logistics events.

The shipment is the source of truth for delivery progress. Its events move
the order along:

- CourierAssigned: Confirmed → Processing
- ShipmentStatusChanged to Picked Up / In Transit: Processing → Shipped
- ShipmentStatusChanged to Delivered: Shipped → Delivered

Events that arrive when the order is already past the target state are
skipped, so redelivered events are harmless.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.logistics import CourierAssigned, ShipmentStatusChanged

from marketplace.domain import marketplace
from marketplace.order.fulfillment import MarkOrderDelivered, MarkOrderProcessing, MarkOrderShipped
from marketplace.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)

marketplace.register_external_event(CourierAssigned, "Logistics.CourierAssigned.v1")
marketplace.register_external_event(ShipmentStatusChanged, "Logistics.ShipmentStatusChanged.v1")

_SHIPPED_SHIPMENT_STATES = {"Picked Up", "In Transit"}


@marketplace.event_handler(part_of=Order, stream_category="logistics::shipment")
class LogisticsOrderEventHandler:
    """Keeps order status in step with its shipment."""

    @handle(CourierAssigned)
    def on_courier_assigned(self, event: CourierAssigned) -> None:
        order = current_domain.repository_for(Order).get(event.order_id)
        if order.status != OrderStatus.CONFIRMED.value:
            logger.info("Order not awaiting a courier, skipping", order_id=str(event.order_id), status=order.status)
            return

        current_domain.process(
            MarkOrderProcessing(
                order_id=event.order_id,
                note=f"Courier {event.courier_name} assigned, tracking {event.tracking_number}",
                updated_by=event.assigned_by,
            ),
            asynchronous=False,
        )

    @handle(ShipmentStatusChanged)
    def on_shipment_status_changed(self, event: ShipmentStatusChanged) -> None:
        order = current_domain.repository_for(Order).get(event.order_id)
        note = event.notes or f"Shipment {event.new_status}"

        if event.new_status in _SHIPPED_SHIPMENT_STATES and order.status == OrderStatus.PROCESSING.value:
            current_domain.process(
                MarkOrderShipped(order_id=event.order_id, note=note, updated_by=event.updated_by),
                asynchronous=False,
            )
        elif event.new_status == "Delivered" and order.status == OrderStatus.SHIPPED.value:
            current_domain.process(
                MarkOrderDelivered(order_id=event.order_id, note=note, updated_by=event.updated_by),
                asynchronous=False,
            )
        else:
            logger.debug(
                "Shipment update does not move the order",
                order_id=str(event.order_id),
                shipment_status=event.new_status,
                order_status=order.status,
            )
