"""Domain events for the Shipment aggregate."""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="Shipment")
class ShipmentCreated:
    __version__ = 1

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    created_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class CourierAssigned:
    __version__ = 1

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    courier_name = String(required=True)
    tracking_number = String(required=True)
    estimated_delivery = DateTime()
    assigned_by = Identifier()
    assigned_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentStatusChanged:
    __version__ = 1

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    tracking_number = String()
    previous_status = String(required=True)
    new_status = String(required=True)
    location = String()
    notes = String()
    updated_by = Identifier()
    changed_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentCancelled:
    __version__ = 1

    shipment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
