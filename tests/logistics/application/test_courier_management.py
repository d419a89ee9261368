"""Application tests for courier administration and shipping rate quotes."""

import json

import pytest
from logistics.courier.courier import Courier
from logistics.courier.management import AddShippingRate, DeactivateCourier, RegisterCourier, UpdateCourier
from logistics.courier.rates import active_couriers, shipping_rates
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain


def _register(name, areas=("Luzon",)):
    return current_domain.process(
        RegisterCourier(name=name, service_areas=json.dumps(list(areas))),
        asynchronous=False,
    )


def _rate(courier_id, base_price, price_per_kg=0.0, from_region="Luzon", to_region="Visayas"):
    current_domain.process(
        AddShippingRate(
            courier_id=courier_id,
            from_region=from_region,
            to_region=to_region,
            base_price=base_price,
            price_per_kg=price_per_kg,
            min_days=2,
            max_days=5,
        ),
        asynchronous=False,
    )


class TestCourierCommands:
    def test_register(self):
        courier = current_domain.repository_for(Courier).get(_register("FarmExpress", ("Luzon", "Mindanao")))
        assert courier.areas == ["Luzon", "Mindanao"]
        assert courier.is_active is True

    def test_update(self):
        courier_id = _register("FarmExpress")
        current_domain.process(
            UpdateCourier(courier_id=courier_id, contact_phone="+63 917 000 0000"), asynchronous=False
        )
        assert current_domain.repository_for(Courier).get(courier_id).contact_phone == "+63 917 000 0000"

    def test_deactivated_courier_leaves_listing(self):
        keep = _register("Bayan Cargo")
        gone = _register("Old Cart")
        current_domain.process(DeactivateCourier(courier_id=gone), asynchronous=False)

        assert [str(c.id) for c in active_couriers()] == [keep]

    def test_active_couriers_sorted_by_name(self):
        _register("zeta Logistics")
        _register("Alpha Freight")
        _register("mango Movers")
        assert [c.name for c in active_couriers()] == ["Alpha Freight", "mango Movers", "zeta Logistics"]

    def test_add_rate_persists(self):
        courier_id = _register("FarmExpress")
        _rate(courier_id, 150.0, 20.0)
        rates = current_domain.repository_for(Courier).get(courier_id).shipping_rates
        assert [(r.from_region, r.to_region, r.base_price) for r in rates] == [("Luzon", "Visayas", 150.0)]


class TestShippingRateQuotes:
    def test_quotes_cheapest_first(self):
        cheap = _register("Cheap Carrier")
        pricey = _register("Premium Carrier")
        _rate(pricey, 100.0, 50.0)
        _rate(cheap, 180.0, 10.0)

        quotes = shipping_rates("Luzon", "Visayas", weight=3)
        assert [q["courier_id"] for q in quotes] == [cheap, pricey]
        assert [q["estimated_cost"] for q in quotes] == [210.0, 250.0]

    def test_skips_couriers_without_a_matching_rate(self):
        courier_id = _register("FarmExpress")
        _rate(courier_id, 150.0, from_region="Luzon", to_region="Mindanao")
        assert shipping_rates("Luzon", "Visayas") == []

    def test_skips_inactive_couriers(self):
        courier_id = _register("FarmExpress")
        _rate(courier_id, 150.0)
        current_domain.process(DeactivateCourier(courier_id=courier_id), asynchronous=False)
        assert shipping_rates("Luzon", "Visayas") == []

    def test_without_weight_quotes_base_price(self):
        courier_id = _register("FarmExpress")
        _rate(courier_id, 150.0, 20.0)
        assert shipping_rates("luzon", "visayas")[0]["estimated_cost"] == 150.0

    def test_regions_are_required(self):
        with pytest.raises(ValidationError) as exc:
            shipping_rates("", None)
        assert set(exc.value.messages) == {"from_region", "to_region"}
