"""Tests for the Cart aggregate — lines, quantity changes, refresh and checkout."""

import pytest
from marketplace.cart.cart import Cart
from marketplace.cart.events import CartCheckedOut, CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from marketplace.product.product import Product
from protean.exceptions import ObjectNotFoundError, ValidationError


def _product(name="Carrots", price=2.0, seller_id="seller-001"):
    return Product.list_for_sale(
        seller_id=seller_id,
        name=name,
        description="Crunchy",
        price=price,
        images=["https://cdn.example.com/p.jpg"],
        category="Vegetables",
        unit_of_measurement="kg",
        stock=10,
    )


class TestCartLines:
    def test_new_cart_is_empty(self):
        cart = Cart.open_for("buyer-001")
        assert cart.buyer_id == "buyer-001"
        assert cart.items == []
        assert cart.total == 0

    def test_add_line_snapshots_product(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 2)

        line = cart.line_for(product.id)
        assert line.quantity == 2
        assert line.name == "Carrots"
        assert line.price == 2.0
        assert line.seller_id == "seller-001"
        assert line.image == "https://cdn.example.com/p.jpg"
        assert cart.total == 4.0
        assert isinstance(cart._events[-1], CartItemAdded)

    def test_adding_same_product_merges_lines(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 2)
        cart.add_line(product, 3)

        assert len(cart.items) == 1
        assert cart.line_for(product.id).quantity == 5
        assert cart._events[-1].line_quantity == 5

    def test_change_quantity_returns_difference(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 2)

        assert cart.change_quantity(product.id, 5) == 3
        assert cart.change_quantity(product.id, 1) == -4
        assert cart.line_for(product.id).quantity == 1
        assert isinstance(cart._events[-1], CartItemUpdated)

    def test_change_to_same_quantity_is_zero(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 2)
        cart._events.clear()

        assert cart.change_quantity(product.id, 2) == 0
        assert cart._events == []

    def test_change_quantity_below_one_rejected(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 2)
        with pytest.raises(ValidationError):
            cart.change_quantity(product.id, 0)

    def test_change_missing_line_raises_not_found(self):
        cart = Cart.open_for("buyer-001")
        with pytest.raises(ObjectNotFoundError):
            cart.change_quantity("nope", 2)

    def test_remove_line_returns_held_units(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 4)

        assert cart.remove_line(product.id) == 4
        assert cart.items == []
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_clear_returns_every_line(self):
        first, second = _product("Carrots"), _product("Kale", price=1.0)
        cart = Cart.open_for("buyer-001")
        cart.add_line(first, 1)
        cart.add_line(second, 3)

        released = cart.clear()
        assert sorted(released) == sorted([(str(first.id), 1), (str(second.id), 3)])
        assert cart.items == []
        assert isinstance(cart._events[-1], CartCleared)


class TestRefresh:
    def test_refresh_updates_snapshot(self):
        product = _product(price=2.0)
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 1)

        product.update_details(price=2.5, name="Baby Carrots")
        dropped = cart.refresh({str(product.id): product})

        assert dropped == []
        line = cart.line_for(product.id)
        assert line.price == 2.5
        assert line.name == "Baby Carrots"

    def test_refresh_drops_missing_and_deleted_products(self):
        kept, deleted, gone = _product("Carrots"), _product("Kale"), _product("Gone")
        cart = Cart.open_for("buyer-001")
        for product in (kept, deleted, gone):
            cart.add_line(product, 1)
        gone_id = str(gone.id)

        deleted.delist()
        dropped = cart.refresh({str(kept.id): kept, str(deleted.id): deleted, gone_id: None})

        assert sorted(dropped) == sorted([(str(deleted.id), 1), (gone_id, 1)])
        assert [str(i.product_id) for i in cart.items] == [str(kept.id)]

    def test_refresh_keeps_line_when_stock_is_reserved_out(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 10)
        product.reserve_stock(10)

        assert cart.refresh({str(product.id): product}) == []
        assert cart.line_for(product.id).quantity == 10


class TestCheckout:
    def test_checkout_hands_over_lines(self):
        product = _product()
        cart = Cart.open_for("buyer-001")
        cart.add_line(product, 2)

        lines = cart.check_out("order-001")
        assert lines == [
            {
                "product_id": str(product.id),
                "seller_id": "seller-001",
                "name": "Carrots",
                "price": 2.0,
                "image": "https://cdn.example.com/p.jpg",
                "quantity": 2,
            }
        ]
        assert cart.items == []
        event = cart._events[-1]
        assert isinstance(event, CartCheckedOut)
        assert event.order_id == "order-001"

    def test_empty_cart_cannot_check_out(self):
        cart = Cart.open_for("buyer-001")
        with pytest.raises(ValidationError):
            cart.check_out("order-001")
