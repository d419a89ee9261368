"""Tests for the Trade aggregate — offer, negotiation, completion and fairness."""

import pytest
from marketplace.product.product import Product
from marketplace.trade.events import (
    TradeAccepted,
    TradeCancelled,
    TradeCompleted,
    TradeInitiated,
    TradeRejected,
    TradeUpdated,
)
from marketplace.trade.trade import AuditAction, Trade, TradeStatus, compute_fairness
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.access import AccessDenied


def _product(seller_id, name, price, stock=10, available_for_trade=True):
    return Product.list_for_sale(
        seller_id=seller_id,
        name=name,
        description=f"{name} from {seller_id}",
        price=price,
        images=["https://cdn.example.com/p.jpg"],
        category="Fruits",
        unit_of_measurement="kg",
        stock=stock,
        available_for_trade=available_for_trade,
    )


@pytest.fixture()
def mangoes():
    return _product("seller-a", "Mangoes", 50.0)


@pytest.fixture()
def bananas():
    return _product("seller-b", "Bananas", 20.0)


@pytest.fixture()
def trade(mangoes, bananas):
    trade = Trade.initiate(mangoes, bananas, "seller-a", "seller-b", quantity_from=2, quantity_to=5)
    trade._events.clear()
    return trade


class TestFairness:
    def test_ratio_and_difference(self):
        fairness = compute_fairness(50.0, 2, 20.0, 4)
        assert fairness.offered_value == 100.0
        assert fairness.requested_value == 80.0
        assert fairness.value_difference == 20.0
        assert fairness.value_ratio == 1.25

    def test_zero_requested_value(self):
        assert compute_fairness(10.0, 1, 0.0, 3).value_ratio == 0.0


class TestInitiate:
    def test_initiate_opens_pending_trade(self, mangoes, bananas):
        trade = Trade.initiate(mangoes, bananas, "seller-a", "seller-b", quantity_from=2, quantity_to=5)
        assert trade.status == TradeStatus.PENDING.value
        assert trade.fairness.value_ratio == 1.0
        event = trade._events[-1]
        assert isinstance(event, TradeInitiated)
        assert event.product_from_name == "Mangoes"
        assert event.product_to_name == "Bananas"

    def test_quantity_to_defaults_to_quantity_from(self, mangoes, bananas):
        trade = Trade.initiate(mangoes, bananas, "seller-a", "seller-b", quantity_from=3)
        assert trade.quantity_to == 3

    def test_cannot_trade_with_yourself(self, mangoes):
        other = _product("seller-a", "Papaya", 30.0)
        with pytest.raises(ValidationError):
            Trade.initiate(mangoes, other, "seller-a", "seller-a", quantity_from=1)

    def test_product_must_belong_to_its_side(self, mangoes, bananas):
        with pytest.raises(ObjectNotFoundError):
            Trade.initiate(bananas, mangoes, "seller-a", "seller-b", quantity_from=1)

    def test_product_must_be_offered_for_trade(self, mangoes):
        hidden = _product("seller-b", "Durian", 80.0, available_for_trade=False)
        with pytest.raises(ValidationError):
            Trade.initiate(mangoes, hidden, "seller-a", "seller-b", quantity_from=1)

    def test_quantity_cannot_exceed_stock(self, mangoes, bananas):
        with pytest.raises(ValidationError):
            Trade.initiate(mangoes, bananas, "seller-a", "seller-b", quantity_from=11, quantity_to=1)


class TestNegotiation:
    def test_initiator_revises_pending_offer(self, trade, mangoes, bananas):
        trade.revise("seller-a", mangoes, bananas, quantity_to=4, message="Final offer")
        assert trade.quantity_from == 2
        assert trade.quantity_to == 4
        assert trade.message == "Final offer"
        assert trade.fairness.value_ratio == 1.25
        assert isinstance(trade._events[-1], TradeUpdated)

    def test_receiver_cannot_revise(self, trade, mangoes, bananas):
        with pytest.raises(AccessDenied):
            trade.revise("seller-b", mangoes, bananas, quantity_to=1)

    def test_receiver_accepts(self, trade, mangoes):
        trade.accept("seller-b", mangoes)
        assert trade.status == TradeStatus.ACCEPTED.value
        assert trade.accepted_at is not None
        assert isinstance(trade._events[-1], TradeAccepted)

    def test_initiator_cannot_accept(self, trade, mangoes):
        with pytest.raises(AccessDenied):
            trade.accept("seller-a", mangoes)

    def test_accept_rechecks_offered_stock(self, trade, mangoes):
        mangoes.reserve_stock(9)
        with pytest.raises(ValidationError):
            trade.accept("seller-b", mangoes)

    def test_receiver_rejects(self, trade):
        trade.reject("seller-b", reason="Not interested")
        assert trade.status == TradeStatus.REJECTED.value
        assert trade.rejection_reason == "Not interested"
        assert isinstance(trade._events[-1], TradeRejected)

    def test_initiator_cancels_pending(self, trade):
        trade.cancel("seller-a", reason="Sold elsewhere")
        assert trade.status == TradeStatus.CANCELLED.value
        assert trade.cancelled_by == "seller-a"
        assert isinstance(trade._events[-1], TradeCancelled)

    def test_accepted_trade_cannot_be_cancelled_by_initiator(self, trade, mangoes):
        trade.accept("seller-b", mangoes)
        with pytest.raises(ValidationError):
            trade.cancel("seller-a")

    def test_force_cancel_covers_accepted_trades(self, trade, mangoes):
        trade.accept("seller-b", mangoes)
        trade.force_cancel(reason="Product deleted", cancelled_by="seller-a")
        assert trade.status == TradeStatus.CANCELLED.value
        assert trade.cancellation_reason == "Product deleted"

    def test_rejected_trade_cannot_be_accepted(self, trade, mangoes):
        trade.reject("seller-b")
        with pytest.raises(ValidationError):
            trade.accept("seller-b", mangoes)


class TestCompletion:
    def test_pending_trade_cannot_complete(self, trade, mangoes, bananas):
        with pytest.raises(ValidationError) as exc:
            trade.complete("seller-a", mangoes, bananas)
        assert "Cannot transition from pending to completed" in str(exc.value)

    def test_complete_swaps_goods(self, trade, mangoes, bananas):
        trade.accept("seller-b", mangoes)
        for_receiver, for_initiator = trade.complete("seller-a", mangoes, bananas)

        assert mangoes.stock == 8
        assert bananas.stock == 5
        assert for_receiver.seller_id == "seller-b"
        assert for_receiver.name == "Mangoes"
        assert for_receiver.stock == 2
        assert for_initiator.seller_id == "seller-a"
        assert for_initiator.name == "Bananas"
        assert for_initiator.stock == 5

        assert trade.status == TradeStatus.COMPLETED.value
        assert trade.derived_product_for_receiver_id == str(for_receiver.id)
        assert trade.derived_product_for_initiator_id == str(for_initiator.id)
        event = trade._events[-1]
        assert isinstance(event, TradeCompleted)
        assert event.completed_by == "seller-a"

    def test_completion_is_audited(self, trade, mangoes, bananas):
        trade.accept("seller-b", mangoes)
        trade.complete("seller-b", mangoes, bananas)

        deducted = [a for a in trade.audit_entries if a.action == AuditAction.STOCK_DEDUCTED.value]
        created = [a for a in trade.audit_entries if a.action == AuditAction.PRODUCT_CREATED.value]
        assert len(deducted) == 2
        assert len(created) == 2
        mango_entry = next(a for a in deducted if a.product_id == str(mangoes.id))
        assert (mango_entry.stock_before, mango_entry.stock_after) == (10, 8)

    def test_outsider_cannot_complete(self, trade, mangoes, bananas):
        trade.accept("seller-b", mangoes)
        with pytest.raises(AccessDenied):
            trade.complete("seller-c", mangoes, bananas)

    def test_complete_checks_stock_on_both_sides(self, trade, mangoes, bananas):
        trade.accept("seller-b", mangoes)
        bananas.reserve_stock(8)
        with pytest.raises(ValidationError):
            trade.complete("seller-a", mangoes, bananas)
        assert mangoes.stock == 10
