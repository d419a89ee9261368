"""Courier management — register, update, deactivate and add rates (admin only)."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from logistics.courier.courier import Courier
from logistics.domain import logistics

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Courier")
class RegisterCourier:
    name = String(required=True, max_length=150)
    contact_email = String(max_length=254)
    contact_phone = String(max_length=30)
    website = String(max_length=500)
    service_areas = Text()  # JSON list
    tracking_url_template = String(max_length=500)


@logistics.command(part_of="Courier")
class UpdateCourier:
    courier_id = Identifier(required=True)
    name = String(max_length=150)
    contact_email = String(max_length=254)
    contact_phone = String(max_length=30)
    website = String(max_length=500)
    service_areas = Text()
    tracking_url_template = String(max_length=500)


@logistics.command(part_of="Courier")
class DeactivateCourier:
    courier_id = Identifier(required=True)


@logistics.command(part_of="Courier")
class AddShippingRate:
    courier_id = Identifier(required=True)
    from_region = String(required=True, max_length=100)
    to_region = String(required=True, max_length=100)
    base_price = Float(required=True, min_value=0.0)
    price_per_kg = Float(default=0.0)
    min_days = Integer()
    max_days = Integer()


def _areas(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@logistics.command_handler(part_of=Courier)
class CourierManagementHandler:
    @handle(RegisterCourier)
    def register_courier(self, command):
        courier = Courier.register(
            name=command.name,
            contact_email=command.contact_email,
            contact_phone=command.contact_phone,
            website=command.website,
            service_areas=_areas(command.service_areas),
            tracking_url_template=command.tracking_url_template,
        )
        current_domain.repository_for(Courier).add(courier)
        logger.info("Courier registered", courier_id=str(courier.id), name=command.name)
        return str(courier.id)

    @handle(UpdateCourier)
    def update_courier(self, command):
        repo = current_domain.repository_for(Courier)
        courier = repo.get(command.courier_id)
        courier.update_details(
            name=command.name,
            contact_email=command.contact_email,
            contact_phone=command.contact_phone,
            website=command.website,
            service_areas=_areas(command.service_areas),
            tracking_url_template=command.tracking_url_template,
        )
        repo.add(courier)

    @handle(DeactivateCourier)
    def deactivate_courier(self, command):
        repo = current_domain.repository_for(Courier)
        courier = repo.get(command.courier_id)
        courier.deactivate()
        repo.add(courier)

    @handle(AddShippingRate)
    def add_shipping_rate(self, command):
        repo = current_domain.repository_for(Courier)
        courier = repo.get(command.courier_id)
        courier.add_rate(
            from_region=command.from_region,
            to_region=command.to_region,
            base_price=command.base_price,
            price_per_kg=command.price_per_kg,
            min_days=command.min_days,
            max_days=command.max_days,
        )
        repo.add(courier)
