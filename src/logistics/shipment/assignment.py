"""Courier assignment — an admin hands a pending shipment to a courier."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.courier.courier import Courier
from logistics.domain import logistics
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class AssignCourier:
    order_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    shipping_method = String(max_length=50)
    estimated_delivery = DateTime()
    instructions = String(max_length=500)
    needs_refrigeration = Boolean(default=False)
    insurance_amount = Float(default=0.0)
    is_contactless = Boolean(default=False)
    package = Text()  # JSON {weight, length, width, height}
    shipping_cost = Float()
    updated_by = Identifier()


def find_shipment(order_id):
    shipments = current_domain.repository_for(Shipment)._dao.query.filter(order_id=str(order_id)).all().items
    return shipments[0] if shipments else None


def shipment_for_order(order_id):
    """The shipment of an order, or ``ObjectNotFoundError``."""
    shipment = find_shipment(order_id)
    if shipment is None:
        raise ObjectNotFoundError(f"No shipment exists for order {order_id}")
    return shipment


@logistics.command_handler(part_of=Shipment)
class AssignCourierHandler:
    @handle(AssignCourier)
    def assign_courier(self, command):
        shipment = shipment_for_order(command.order_id)
        courier = current_domain.repository_for(Courier).get(command.courier_id)

        shipment.assign_courier(
            courier,
            shipping_method=command.shipping_method,
            estimated_delivery=command.estimated_delivery,
            instructions=command.instructions,
            needs_refrigeration=command.needs_refrigeration,
            insurance_amount=command.insurance_amount,
            is_contactless=command.is_contactless,
            package=json.loads(command.package) if command.package else None,
            shipping_cost=command.shipping_cost,
            updated_by=command.updated_by,
        )
        current_domain.repository_for(Shipment).add(shipment)
        logger.info(
            "Courier assigned",
            order_id=str(command.order_id),
            courier_id=str(courier.id),
            tracking_number=shipment.tracking_number,
        )
        return shipment.tracking_number
