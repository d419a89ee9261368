"""Read-side helpers for orders, used by the API routes."""

from protean.utils.globals import current_domain

from marketplace.order.order import Order


def buyer_orders(buyer_id, status=None):
    """A buyer's orders, newest first."""
    filters = {"buyer_id": str(buyer_id)}
    if status:
        filters["status"] = status
    orders = current_domain.repository_for(Order)._dao.query.filter(**filters).limit(None).all().items
    return sorted(orders, key=lambda o: o.placed_at, reverse=True)


def order_detail(order_id, actor_id, is_admin=False):
    order = current_domain.repository_for(Order).get(order_id)
    order.assert_visible_to(actor_id, is_admin=is_admin)
    return order


def order_history(order_id, actor_id, is_admin=False):
    """Merged tracking, seller-action and refund timeline of an order, newest first."""
    return order_detail(order_id, actor_id, is_admin=is_admin).history()
