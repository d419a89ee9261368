"""Read-side helpers for products, used by the API routes."""

from protean.utils.globals import current_domain

from marketplace.product.product import Product
from shared.access import AccessDenied


def _products(**filters):
    return current_domain.repository_for(Product)._dao.query.filter(**filters).limit(None).all().items


def _newest_first(products):
    return sorted(products, key=lambda p: p.created_at, reverse=True)


def active_listings(category=None, seller_id=None):
    """Products a buyer can currently purchase."""
    filters = {"is_deleted": False, "is_active": True}
    if category:
        filters["category"] = category
    if seller_id:
        filters["seller_id"] = seller_id
    return _newest_first(_products(**filters))


def seller_products(seller_id):
    return _newest_first(_products(seller_id=seller_id, is_deleted=False))


def tradeable_products(seller_id=None):
    filters = {"is_deleted": False, "available_for_trade": True}
    if seller_id:
        filters["seller_id"] = seller_id
    return [p for p in _newest_first(_products(**filters)) if p.stock > 0]


def received_traded_products(seller_id):
    """Products that reached ``seller_id`` through a completed trade."""
    return [p for p in seller_products(seller_id) if p.origin is not None]


def product_trade_history(product_id, actor_id):
    """Trade history of a product. Visible to its owner and to anyone it was traded with."""
    product = current_domain.repository_for(Product).get(product_id)
    involved = {str(product.seller_id)}
    for entry in product.trade_history:
        involved.update({str(entry.traded_from), str(entry.traded_to)})
    if str(actor_id) not in involved:
        raise AccessDenied("You are not involved with this product's trades")

    return product, sorted(product.trade_history, key=lambda e: e.recorded_at, reverse=True)
