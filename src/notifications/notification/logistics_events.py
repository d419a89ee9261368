"""Inbound cross-domain event handler — Notifications reacts to Shipment events."""

from notifications.domain import notifications
from notifications.notification.helpers import notify
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.logistics import CourierAssigned, ShipmentStatusChanged

notifications.register_external_event(CourierAssigned, "Logistics.CourierAssigned.v1")
notifications.register_external_event(ShipmentStatusChanged, "Logistics.ShipmentStatusChanged.v1")


@notifications.event_handler(part_of=Notification, stream_category="logistics::shipment")
class ShipmentEventsHandler:
    @handle(CourierAssigned)
    def on_courier_assigned(self, event: CourierAssigned) -> None:
        notify(
            event.buyer_id,
            NotificationType.SHIPPING_ASSIGNED.value,
            {
                "order_id": str(event.order_id),
                "shipment_id": str(event.shipment_id),
                "courier_name": event.courier_name,
                "tracking_number": event.tracking_number,
            },
            source_event_type="Logistics.CourierAssigned.v1",
        )

    @handle(ShipmentStatusChanged)
    def on_shipment_status_changed(self, event: ShipmentStatusChanged) -> None:
        notify(
            event.buyer_id,
            NotificationType.SHIPPING_UPDATE.value,
            {
                "order_id": str(event.order_id),
                "shipment_id": str(event.shipment_id),
                "tracking_number": event.tracking_number,
                "status": event.new_status,
                "location": event.location,
            },
            source_event_type="Logistics.ShipmentStatusChanged.v1",
        )
