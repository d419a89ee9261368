"""Cart line management — commands and handler.

Each handler touches both the cart and the product stock it reserves, inside
the same Unit of Work.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.product.product import Product
from marketplace.product.stock import release_units

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Cart")
class AddToCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@marketplace.command(part_of="Cart")
class UpdateCartItem:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    buyer_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class RefreshCart:
    buyer_id = Identifier(required=True)


def load_cart(buyer_id, create=False):
    """Fetch the buyer's cart, opening an empty one when ``create`` is set."""
    try:
        return current_domain.repository_for(Cart).get(buyer_id)
    except ObjectNotFoundError:
        if not create:
            raise
        return Cart.open_for(buyer_id)


@marketplace.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product_repo = current_domain.repository_for(Product)
        product = product_repo.get(command.product_id)
        cart = load_cart(command.buyer_id, create=True)

        quantity = command.quantity or 1
        product.reserve_stock(quantity)
        cart.add_line(product, quantity)

        product_repo.add(product)
        current_domain.repository_for(Cart).add(cart)
        logger.info(
            "Reserved stock for cart",
            buyer_id=str(command.buyer_id),
            product_id=str(product.id),
            quantity=quantity,
            stock_left=product.stock,
        )

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = load_cart(command.buyer_id)
        product_repo = current_domain.repository_for(Product)
        product = product_repo.get(command.product_id)

        diff = cart.change_quantity(command.product_id, command.quantity)
        if diff > 0:
            product.reserve_stock(diff)
        elif diff < 0:
            product.release_stock(-diff)

        product_repo.add(product)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.buyer_id)
        quantity = cart.remove_line(command.product_id)
        release_units([(command.product_id, quantity)])
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.buyer_id)
        release_units(cart.clear())
        current_domain.repository_for(Cart).add(cart)

    @handle(RefreshCart)
    def refresh_cart(self, command):
        cart = load_cart(command.buyer_id, create=True)
        product_repo = current_domain.repository_for(Product)
        products = {}
        for line in cart.items:
            try:
                products[str(line.product_id)] = product_repo.get(line.product_id)
            except ObjectNotFoundError:
                products[str(line.product_id)] = None

        dropped = cart.refresh(products)
        release_units(dropped)
        current_domain.repository_for(Cart).add(cart)
        if dropped:
            logger.info(
                "Dropped unavailable cart lines",
                buyer_id=str(command.buyer_id),
                product_ids=[product_id for product_id, _ in dropped],
            )

