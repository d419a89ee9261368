"""Shipment progress updates, keyed by tracking number."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class UpdateShipmentStatus:
    tracking_number = String(required=True, max_length=20)
    status = String(required=True, max_length=50)
    location = String(max_length=255)
    notes = String(max_length=500)
    received_by = String(max_length=150)
    photo_url = String(max_length=1000)
    updated_by = Identifier()


def shipment_by_tracking_number(tracking_number):
    shipments = (
        current_domain.repository_for(Shipment)._dao.query.filter(tracking_number=tracking_number).all().items
    )
    if not shipments:
        raise ObjectNotFoundError(f"Shipment with tracking number {tracking_number} not found")
    return shipments[0]


@logistics.command_handler(part_of=Shipment)
class ShipmentTrackingHandler:
    @handle(UpdateShipmentStatus)
    def update_status(self, command):
        shipment = shipment_by_tracking_number(command.tracking_number)
        previous = shipment.status
        shipment.update_status(
            command.status,
            location=command.location,
            notes=command.notes,
            updated_by=command.updated_by,
            received_by=command.received_by,
            photo_url=command.photo_url,
        )
        current_domain.repository_for(Shipment).add(shipment)
        logger.info(
            "Shipment status updated",
            tracking_number=command.tracking_number,
            previous_status=previous,
            new_status=shipment.status,
        )
