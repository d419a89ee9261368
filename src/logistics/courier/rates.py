"""Courier read-side helpers — listings and shipping rate quotes."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from logistics.courier.courier import Courier


def active_couriers():
    couriers = current_domain.repository_for(Courier)._dao.query.filter(is_active=True).limit(None).all().items
    return sorted(couriers, key=lambda c: c.name.lower())


def shipping_rates(from_region, to_region, weight=None):
    """Quotes from every active courier serving the region pair, cheapest first."""
    missing = {}
    if not from_region:
        missing["from_region"] = ["Origin region is required"]
    if not to_region:
        missing["to_region"] = ["Destination region is required"]
    if missing:
        raise ValidationError(missing)

    quotes = []
    for courier in active_couriers():
        rate = courier.rate_for(from_region, to_region)
        if rate is None:
            continue
        quotes.append(
            {
                "courier_id": str(courier.id),
                "courier_name": courier.name,
                "base_price": rate.base_price,
                "price_per_kg": rate.price_per_kg or 0.0,
                "estimated_cost": rate.cost_for(weight),
                "min_days": rate.min_days,
                "max_days": rate.max_days,
            }
        )
    return sorted(quotes, key=lambda q: q["estimated_cost"])
