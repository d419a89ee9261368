"""Courier aggregate — a delivery company and the rates it charges."""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text

from logistics.courier.events import CourierDeactivated, CourierRegistered, CourierUpdated, ShippingRateAdded
from logistics.domain import logistics

TRACKING_PLACEHOLDER = "{tracking_number}"

_EDITABLE_FIELDS = ("name", "contact_email", "contact_phone", "website", "service_areas", "tracking_url_template")


@logistics.entity(part_of="Courier")
class ShippingRate:
    from_region = String(required=True, max_length=100)
    to_region = String(required=True, max_length=100)
    base_price = Float(required=True, min_value=0.0)
    price_per_kg = Float(default=0.0, min_value=0.0)
    min_days = Integer(min_value=0)
    max_days = Integer(min_value=0)

    def serves(self, from_region, to_region):
        return (
            self.from_region.strip().lower() == from_region.strip().lower()
            and self.to_region.strip().lower() == to_region.strip().lower()
        )

    def cost_for(self, weight=None):
        return round(self.base_price + (self.price_per_kg or 0.0) * (weight or 0.0), 2)


@logistics.aggregate
class Courier:
    name = String(required=True, max_length=150)
    contact_email = String(max_length=254)
    contact_phone = String(max_length=30)
    website = String(max_length=500)
    service_areas = Text()  # JSON list of region names
    tracking_url_template = String(max_length=500)
    is_active = Boolean(default=True)
    shipping_rates = HasMany(ShippingRate)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(
        cls,
        name,
        contact_email=None,
        contact_phone=None,
        website=None,
        service_areas=None,
        tracking_url_template=None,
    ):
        now = datetime.now(UTC)
        courier = cls(
            name=name,
            contact_email=contact_email,
            contact_phone=contact_phone,
            website=website,
            service_areas=json.dumps(list(service_areas or [])),
            tracking_url_template=tracking_url_template,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        courier.raise_(
            CourierRegistered(
                courier_id=str(courier.id),
                name=name,
                service_areas=courier.service_areas,
                registered_at=now,
            )
        )
        return courier

    @property
    def areas(self):
        return json.loads(self.service_areas) if self.service_areas else []

    def tracking_url(self, tracking_number):
        if not self.tracking_url_template or not tracking_number:
            return None
        return self.tracking_url_template.replace(TRACKING_PLACEHOLDER, tracking_number)

    def assert_active(self):
        if not self.is_active:
            raise ValidationError({"courier_id": [f"Courier {self.name} is not active"]})

    def update_details(self, **changes):
        applied = []
        for field_name in _EDITABLE_FIELDS:
            value = changes.get(field_name)
            if value is None:
                continue
            if field_name == "service_areas":
                value = json.dumps(list(value))
            setattr(self, field_name, value)
            applied.append(field_name)
        if not applied:
            return

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CourierUpdated(courier_id=str(self.id), changed_fields=json.dumps(applied), updated_at=self.updated_at)
        )

    def deactivate(self):
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(CourierDeactivated(courier_id=str(self.id), deactivated_at=now))

    def add_rate(self, from_region, to_region, base_price, price_per_kg=0.0, min_days=None, max_days=None):
        if min_days is not None and max_days is not None and min_days > max_days:
            raise ValidationError({"min_days": ["Minimum days cannot exceed maximum days"]})

        self.add_shipping_rates(
            ShippingRate(
                from_region=from_region,
                to_region=to_region,
                base_price=base_price,
                price_per_kg=price_per_kg or 0.0,
                min_days=min_days,
                max_days=max_days,
            )
        )
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShippingRateAdded(
                courier_id=str(self.id),
                from_region=from_region,
                to_region=to_region,
                base_price=base_price,
                price_per_kg=price_per_kg or 0.0,
                min_days=min_days,
                max_days=max_days,
            )
        )

    def rate_for(self, from_region, to_region):
        return next((r for r in self.shipping_rates if r.serves(from_region, to_region)), None)
