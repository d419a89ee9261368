"""Order placement — direct purchase and cart checkout.

Direct purchase deducts stock here. Checkout converts the cart's existing
reservation, so stock is not touched a second time.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.cart.items import load_cart
from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.product.product import Product

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{"product_id": ..., "quantity": ...}]
    address = Text(required=True)  # JSON: address dict
    payment_method = String(max_length=50, default="COD")


@marketplace.command(part_of="Order")
class CheckoutCart:
    buyer_id = Identifier(required=True)
    address = Text(required=True)  # JSON: address dict
    payment_method = String(max_length=50, default="COD")


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


def _merge_requested(items):
    """Collapse repeated product ids into one line each, keeping first-seen order."""
    merged = {}
    for entry in items:
        product_id = str(entry.get("product_id") or "")
        if not product_id:
            raise ValidationError({"items": ["Every item needs a product_id"]})
        quantity = int(entry.get("quantity") or 1)
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


@marketplace.command_handler(part_of=Order)
class OrderPlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested = _merge_requested(_loads(command.items) or [])
        if not requested:
            raise ValidationError({"items": ["An order needs at least one item"]})

        product_repo = current_domain.repository_for(Product)
        lines = []
        for product_id, quantity in requested.items():
            product = product_repo.get(product_id)
            if product.is_deleted:
                raise ObjectNotFoundError(f"Product {product_id} is no longer available")
            product.reserve_stock(quantity)
            product_repo.add(product)
            lines.append(
                {
                    "product_id": str(product.id),
                    "seller_id": str(product.seller_id),
                    "name": product.name,
                    "price": product.price,
                    "image": product.primary_image,
                    "quantity": quantity,
                }
            )

        order = Order.place(
            buyer_id=command.buyer_id,
            lines=lines,
            address=_loads(command.address),
            payment_method=command.payment_method,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Order placed", order_id=str(order.id), buyer_id=str(command.buyer_id), amount=order.amount)
        return str(order.id)

    @handle(CheckoutCart)
    def checkout_cart(self, command):
        cart = load_cart(command.buyer_id, create=True)
        order = Order.place(
            buyer_id=command.buyer_id,
            lines=cart.lines,
            address=_loads(command.address),
            payment_method=command.payment_method,
        )
        cart.check_out(order.id)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Cart).add(cart)
        logger.info(
            "Cart checked out",
            order_id=str(order.id),
            buyer_id=str(command.buyer_id),
            line_count=len(order.items),
        )
        return str(order.id)
