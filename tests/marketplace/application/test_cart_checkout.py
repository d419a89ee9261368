"""Application tests for cart reservations and checkout."""

import json

import pytest
from marketplace.cart.cart import Cart
from marketplace.cart.items import AddToCart, ClearCart, RefreshCart, RemoveFromCart, UpdateCartItem, load_cart
from marketplace.order.order import Order
from marketplace.order.placement import CheckoutCart
from marketplace.product.listing import DelistProduct, ListProduct
from marketplace.product.product import Product
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

ADDRESS = json.dumps({"street": "12 Farm Road", "city": "Davao", "zipcode": "8000", "country": "PH"})


def _list_product(stock=5, price=3.0, name="Tomatoes"):
    return current_domain.process(
        ListProduct(
            seller_id="seller-001",
            name=name,
            description="Fresh",
            price=price,
            images=json.dumps(["https://cdn.example.com/p.jpg"]),
            category="Vegetables",
            unit_of_measurement="kg",
            stock=stock,
        ),
        asynchronous=False,
    )


def _add(product_id, quantity, buyer_id="buyer-001"):
    current_domain.process(AddToCart(buyer_id=buyer_id, product_id=product_id, quantity=quantity), asynchronous=False)


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


class TestCartReservations:
    def test_adding_reserves_stock(self):
        product_id = _list_product(stock=5)
        _add(product_id, 2)

        cart = load_cart("buyer-001")
        assert cart.line_for(product_id).quantity == 2
        assert _stock(product_id) == 3

    def test_adding_beyond_stock_fails(self):
        product_id = _list_product(stock=1)
        with pytest.raises(ValidationError):
            _add(product_id, 2)
        assert _stock(product_id) == 1

    def test_quantity_change_moves_only_the_difference(self):
        product_id = _list_product(stock=5)
        _add(product_id, 2)

        current_domain.process(
            UpdateCartItem(buyer_id="buyer-001", product_id=product_id, quantity=4), asynchronous=False
        )
        assert _stock(product_id) == 1

        current_domain.process(
            UpdateCartItem(buyer_id="buyer-001", product_id=product_id, quantity=1), asynchronous=False
        )
        assert _stock(product_id) == 4

    def test_remove_releases_line(self):
        product_id = _list_product(stock=5)
        _add(product_id, 3)
        current_domain.process(RemoveFromCart(buyer_id="buyer-001", product_id=product_id), asynchronous=False)

        assert load_cart("buyer-001").items == []
        assert _stock(product_id) == 5

    def test_clear_releases_everything(self):
        first, second = _list_product(name="Tomatoes"), _list_product(name="Onions")
        _add(first, 1)
        _add(second, 2)
        current_domain.process(ClearCart(buyer_id="buyer-001"), asynchronous=False)

        assert _stock(first) == 5
        assert _stock(second) == 5

    def test_missing_cart_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            load_cart("nobody")

    def test_refresh_drops_deleted_products(self):
        kept, deleted = _list_product(name="Tomatoes"), _list_product(name="Onions")
        _add(kept, 1)
        _add(deleted, 1)
        current_domain.process(DelistProduct(product_id=deleted, seller_id="seller-001"), asynchronous=False)

        current_domain.process(RefreshCart(buyer_id="buyer-001"), asynchronous=False)

        cart = load_cart("buyer-001")
        assert [str(i.product_id) for i in cart.items] == [kept]
        assert _stock(deleted) == 5
        assert current_domain.repository_for(Product).get(deleted).is_active is False
        assert _stock(kept) == 4


class TestCheckout:
    def test_checkout_converts_reservation_without_touching_stock(self):
        product_id = _list_product(stock=5, price=3.0)
        _add(product_id, 2)

        order_id = current_domain.process(CheckoutCart(buyer_id="buyer-001", address=ADDRESS), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.amount == 6.0
        assert order.items[0].quantity == 2
        assert _stock(product_id) == 3
        assert current_domain.repository_for(Cart).get("buyer-001").items == []

    def test_empty_cart_cannot_check_out(self):
        product_id = _list_product()
        _add(product_id, 1)
        current_domain.process(RemoveFromCart(buyer_id="buyer-001", product_id=product_id), asynchronous=False)

        with pytest.raises(ValidationError):
            current_domain.process(CheckoutCart(buyer_id="buyer-001", address=ADDRESS), asynchronous=False)

    def test_buyer_without_a_cart_cannot_check_out(self):
        with pytest.raises(ValidationError):
            current_domain.process(CheckoutCart(buyer_id="never-shopped", address=ADDRESS), asynchronous=False)
