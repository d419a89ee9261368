"""Domain events for the Courier aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from logistics.domain import logistics


@logistics.event(part_of="Courier")
class CourierRegistered:
    __version__ = 1

    courier_id = Identifier(required=True)
    name = String(required=True)
    service_areas = Text()
    registered_at = DateTime(required=True)


@logistics.event(part_of="Courier")
class CourierUpdated:
    __version__ = 1

    courier_id = Identifier(required=True)
    changed_fields = Text(required=True)
    updated_at = DateTime(required=True)


@logistics.event(part_of="Courier")
class CourierDeactivated:
    __version__ = 1

    courier_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@logistics.event(part_of="Courier")
class ShippingRateAdded:
    __version__ = 1

    courier_id = Identifier(required=True)
    from_region = String(required=True)
    to_region = String(required=True)
    base_price = Float(required=True)
    price_per_kg = Float()
    min_days = Integer()
    max_days = Integer()
