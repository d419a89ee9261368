"""Cross-domain event contracts for Logistics domain events.

Consumed by Marketplace (to move orders through Processing, Shipped and
Delivered) and by Notifications (to tell buyers about their deliveries).
Registered as external events via domain.register_external_event().

The source-of-truth events are in src/logistics/shipment/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class CourierAssigned(BaseEvent):
    """A courier took on the shipment and a tracking number was issued."""

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


class ShipmentStatusChanged(BaseEvent):
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
