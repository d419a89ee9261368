"""BDD tests for how stock follows an order through placement and early exits."""

import json

from marketplace.order.cancellation import CancelOrder
from marketplace.order.order import Order
from marketplace.order.placement import PlaceOrder
from marketplace.order.seller_actions import ConfirmOrder, RejectOrder
from marketplace.product.listing import ListProduct
from marketplace.product.product import Product
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/order_stock.feature")

BUYER_ID = "buyer-001"
ADDRESS = json.dumps({"street": "12 Farm Road", "city": "Davao", "zipcode": "8000", "country": "PH"})


def _place(products, order_state, quantity, name):
    order_state["order_id"] = current_domain.process(
        PlaceOrder(
            buyer_id=BUYER_ID,
            items=json.dumps([{"product_id": products[name], "quantity": quantity}]),
            address=ADDRESS,
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('"{seller_id}" lists {stock:d} units of "{name}" at {price:f}'))
def seller_lists(products, seller_id, stock, name, price):
    products[name] = current_domain.process(
        ListProduct(
            seller_id=seller_id,
            name=name,
            description=f"{name} from {seller_id}",
            price=price,
            images=json.dumps(["https://cdn.example.com/p.jpg"]),
            category="Fruits",
            unit_of_measurement="kg",
            stock=stock,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the buyer has ordered {quantity:d} units of "{name}"'))
def buyer_has_ordered(products, order_state, quantity, name):
    _place(products, order_state, quantity, name)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the buyer orders {quantity:d} units of "{name}"'))
def buyer_orders(products, order_state, error, quantity, name):
    try:
        _place(products, order_state, quantity, name)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('"{seller_id}" rejects the order because "{reason}"'))
def seller_rejects(order_state, seller_id, reason):
    current_domain.process(
        RejectOrder(order_id=order_state["order_id"], seller_id=seller_id, reason=reason),
        asynchronous=False,
    )


@when(parsers.cfparse('"{seller_id}" confirms the order'))
def seller_confirms(order_state, seller_id):
    current_domain.process(
        ConfirmOrder(order_id=order_state["order_id"], seller_id=seller_id),
        asynchronous=False,
    )


@when("the buyer cancels the order")
def buyer_cancels(order_state):
    current_domain.process(
        CancelOrder(order_id=order_state["order_id"], buyer_id=BUYER_ID, reason="Changed my mind"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} units in stock'))
def product_has_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_state, status):
    order = current_domain.repository_for(Order).get(order_state["order_id"])
    assert order.status == status
