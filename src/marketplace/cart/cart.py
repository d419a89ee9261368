"""Cart aggregate — a buyer's basket, holding stock reservations.

Stock is taken from the product when a line is added, not at checkout. The
cart therefore owns reserved units: changing a line's quantity moves only the
difference, removing a line hands its units back, and checking out converts
the reservation into an order without touching stock again.

There is exactly one cart per buyer, identified by the buyer's id.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemUpdated,
)
from marketplace.domain import marketplace


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@marketplace.aggregate
class Cart:
    buyer_id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open_for(cls, buyer_id):
        now = datetime.now(UTC)
        return cls(buyer_id=buyer_id, created_at=now, updated_at=now)

    @property
    def total(self):
        return round(sum(item.price * item.quantity for item in self.items), 2)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _require_line(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise ObjectNotFoundError(f"Product {product_id} is not in the cart")
        return line

    # -------------------------------------------------------------------
    # Lines
    # -------------------------------------------------------------------
    def add_line(self, product, quantity=1):
        """Record ``quantity`` more units of ``product``. Stock is reserved by the caller."""
        now = datetime.now(UTC)
        line = self.line_for(product.id)
        if line:
            line.quantity += quantity
            _snapshot(line, product)
        else:
            line = CartItem(
                product_id=str(product.id),
                seller_id=str(product.seller_id),
                name=product.name,
                price=product.price,
                image=product.primary_image,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(line)

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                buyer_id=str(self.buyer_id),
                product_id=str(product.id),
                quantity=quantity,
                line_quantity=line.quantity,
            )
        )

    def change_quantity(self, product_id, quantity):
        """Set a line's quantity and return the difference (positive means more units needed)."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        line = self._require_line(product_id)
        diff = quantity - line.quantity
        if diff == 0:
            return 0

        previous = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemUpdated(
                buyer_id=str(self.buyer_id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )
        return diff

    def remove_line(self, product_id):
        """Drop a line and return how many units it was holding."""
        line = self._require_line(product_id)
        quantity = line.quantity
        self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                buyer_id=str(self.buyer_id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )
        return quantity

    def clear(self):
        """Empty the cart and return ``(product_id, quantity)`` for every released line."""
        released = [(str(i.product_id), i.quantity) for i in self.items]
        for line in list(self.items):
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        if released:
            self.raise_(CartCleared(buyer_id=str(self.buyer_id), line_count=len(released)))
        return released

    def refresh(self, products_by_id):
        """Re-snapshot name/price/image and drop lines whose product is gone.

        ``products_by_id`` maps product id to the loaded Product, or None when
        the product no longer exists. Returns ``(product_id, quantity)`` for every
        dropped line so the reserved units can go back to the product.
        A line is never dropped just because stock reads 0: those units are
        the buyer's own reservation.
        """
        dropped = []
        for line in list(self.items):
            product = products_by_id.get(str(line.product_id))
            if product is None or product.is_deleted:
                self.remove_items(line)
                dropped.append((str(line.product_id), line.quantity))
            else:
                _snapshot(line, product)
        self.updated_at = datetime.now(UTC)
        return dropped

    @property
    def lines(self):
        """Line snapshots in the shape an order takes them."""
        return [
            {
                "product_id": str(i.product_id),
                "seller_id": str(i.seller_id),
                "name": i.name,
                "price": i.price,
                "image": i.image,
                "quantity": i.quantity,
            }
            for i in self.items
        ]

    def check_out(self, order_id):
        """Hand the reserved lines over to an order and empty the cart."""
        if not self.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        lines = self.lines
        for line in list(self.items):
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartCheckedOut(
                buyer_id=str(self.buyer_id),
                order_id=str(order_id),
                line_count=len(lines),
            )
        )
        return lines


def _snapshot(line, product):
    line.name = product.name
    line.price = product.price
    line.image = product.primary_image
