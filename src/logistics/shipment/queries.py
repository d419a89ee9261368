"""Shipment read-side helpers — tracking, order status and the pending queue."""

import math

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.courier.courier import Courier
from logistics.shipment.assignment import find_shipment
from logistics.shipment.shipment import Shipment, ShipmentStatus
from logistics.shipment.tracking import shipment_by_tracking_number

NOT_ASSIGNED = "Not Assigned"


def track(tracking_number, user_id, is_admin=False):
    shipment = shipment_by_tracking_number(tracking_number)
    shipment.assert_trackable_by(user_id, is_admin)

    courier = None
    if shipment.courier_id:
        try:
            courier = current_domain.repository_for(Courier).get(shipment.courier_id)
        except ObjectNotFoundError:
            courier = None

    return {
        "shipment": shipment,
        "courier": courier,
        "tracking_url": courier.tracking_url(shipment.tracking_number) if courier else None,
        "history": shipment.history(),
    }


def order_shipping_status(order_id):
    shipment = find_shipment(order_id)
    if shipment is None:
        return {"order_id": str(order_id), "status": NOT_ASSIGNED, "shipment": None}
    return {"order_id": str(order_id), "status": shipment.status, "shipment": shipment}


def pending_shipments(page=1, limit=10):
    """Shipments waiting for a courier, oldest first."""
    page = max(int(page or 1), 1)
    limit = max(int(limit or 10), 1)
    shipments = (
        current_domain.repository_for(Shipment)
        ._dao.query.filter(status=ShipmentStatus.PENDING.value)
        .limit(None)
        .all()
        .items
    )
    shipments = sorted(shipments, key=lambda s: s.created_at)
    total = len(shipments)
    start = (page - 1) * limit
    return {
        "shipments": shipments[start : start + limit],
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if total else 0,
    }
