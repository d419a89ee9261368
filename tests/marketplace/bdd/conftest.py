"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import pytest
from marketplace.trade.events import (
    TradeAccepted,
    TradeCancelled,
    TradeCompleted,
    TradeInitiated,
    TradeRejected,
    TradeUpdated,
)
from protean.exceptions import ValidationError
from pytest_bdd import parsers, then
from shared.access import AccessDenied

# Map event name strings to classes for dynamic lookup in Then steps
_TRADE_EVENT_CLASSES = {
    "TradeInitiated": TradeInitiated,
    "TradeUpdated": TradeUpdated,
    "TradeAccepted": TradeAccepted,
    "TradeRejected": TradeRejected,
    "TradeCancelled": TradeCancelled,
    "TradeCompleted": TradeCompleted,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products in play, keyed by name."""
    return {}


@pytest.fixture()
def trade_state():
    return {"trade": None, "derived": ()}


@pytest.fixture()
def order_state():
    return {"order_id": None}


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("the action is denied")
def action_is_denied(error):
    assert isinstance(error["exc"], AccessDenied), f"Expected AccessDenied, got {error['exc']!r}"


@then(parsers.cfparse('the trade status is "{status}"'))
def trade_status_is(trade_state, status):
    assert trade_state["trade"].status == status


@then(parsers.cfparse("a {event_type} trade event is raised"))
def trade_event_raised(trade_state, event_type):
    event_cls = _TRADE_EVENT_CLASSES[event_type]
    events = trade_state["trade"]._events
    assert any(
        isinstance(e, event_cls) for e in events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in events]}"
