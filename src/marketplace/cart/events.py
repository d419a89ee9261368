"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from marketplace.domain import marketplace


@marketplace.event(part_of="Cart")
class CartItemAdded:
    __version__ = 1

    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartItemUpdated:
    __version__ = 1

    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    buyer_id = Identifier(required=True)
    line_count = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartCheckedOut:
    """Reserved lines were converted into an order."""

    __version__ = 1

    buyer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    line_count = Integer(required=True)
