"""BDD tests for the barter trade lifecycle."""

from marketplace.product.product import Product
from marketplace.trade.trade import Trade
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from shared.access import AccessDenied

scenarios("features/trade_lifecycle.feature")


def _open_trade(products, trade_state, seller_id, qty_from, name_from, qty_to, name_to):
    offered, wanted = products[name_from], products[name_to]
    trade_state["trade"] = Trade.initiate(
        offered,
        wanted,
        seller_from=seller_id,
        seller_to=str(wanted.seller_id),
        quantity_from=qty_from,
        quantity_to=qty_to,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('seller "{seller_id}" offers {stock:d} "{name}" at {price:f} for trade'))
def seller_offers_product(products, seller_id, stock, name, price):
    products[name] = Product.list_for_sale(
        seller_id=seller_id,
        name=name,
        description=f"{name} from {seller_id}",
        price=price,
        images=["https://cdn.example.com/p.jpg"],
        category="Fruits",
        unit_of_measurement="kg",
        stock=stock,
        available_for_trade=True,
    )


@given(parsers.cfparse('"{seller_id}" has offered {qty_from:d} "{name_from}" for {qty_to:d} "{name_to}"'))
def trade_already_offered(products, trade_state, seller_id, qty_from, name_from, qty_to, name_to):
    _open_trade(products, trade_state, seller_id, qty_from, name_from, qty_to, name_to)
    trade_state["trade"]._events.clear()


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{seller_id}" offers {qty_from:d} "{name_from}" for {qty_to:d} "{name_to}"'))
def seller_opens_trade(products, trade_state, seller_id, qty_from, name_from, qty_to, name_to):
    _open_trade(products, trade_state, seller_id, qty_from, name_from, qty_to, name_to)


@when(parsers.cfparse('"{seller_id}" accepts the trade'))
def seller_accepts(products, trade_state, error, seller_id):
    trade = trade_state["trade"]
    offered = next(p for p in products.values() if str(p.id) == str(trade.product_from_id))
    try:
        trade.accept(seller_id, offered)
    except (ValidationError, AccessDenied) as exc:
        error["exc"] = exc


@when(parsers.cfparse('"{seller_id}" rejects the trade because "{reason}"'))
def seller_rejects(trade_state, seller_id, reason):
    trade_state["trade"].reject(seller_id, reason=reason)


@when(parsers.cfparse('"{seller_id}" completes the trade'))
def seller_completes(products, trade_state, error, seller_id):
    trade = trade_state["trade"]
    by_id = {str(p.id): p for p in products.values()}
    try:
        trade_state["derived"] = trade.complete(
            seller_id, by_id[str(trade.product_from_id)], by_id[str(trade.product_to_id)]
        )
    except (ValidationError, AccessDenied) as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the trade value ratio is {ratio:f}"))
def trade_value_ratio(trade_state, ratio):
    assert trade_state["trade"].fairness.value_ratio == ratio


@then(parsers.cfparse('"{name}" has {stock:d} units left'))
def product_units_left(products, name, stock):
    assert products[name].stock == stock


@then(parsers.cfparse('"{seller_id}" received {quantity:d} units of "{name}"'))
def seller_received(trade_state, seller_id, quantity, name):
    derived = [p for p in trade_state["derived"] if str(p.seller_id) == seller_id]
    assert len(derived) == 1
    assert derived[0].name == name
    assert derived[0].stock == quantity
    assert derived[0].origin.trade_id == str(trade_state["trade"].id)
