"""Application tests for shipments — opened from Marketplace events, assigned and tracked."""

import json
from datetime import UTC, datetime

import pytest
from logistics.courier.management import DeactivateCourier, RegisterCourier
from logistics.shipment.assignment import AssignCourier, find_shipment, shipment_for_order
from logistics.shipment.marketplace_events import MarketplaceOrderEventHandler
from logistics.shipment.queries import NOT_ASSIGNED, order_shipping_status, pending_shipments, track
from logistics.shipment.shipment import ShipmentStatus
from logistics.shipment.tracking import UpdateShipmentStatus
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from shared.access import AccessDenied
from shared.events.marketplace import OrderCancelled, OrderConfirmed, OrderRefunded

ADDRESS = json.dumps({"street": "1 Road", "city": "Baguio", "zipcode": "2600", "country": "PH"})


def _order_confirmed(order_id="order-001", buyer_id="buyer-001"):
    return OrderConfirmed(
        order_id=order_id,
        buyer_id=buyer_id,
        seller_ids=json.dumps(["seller-001"]),
        amount=120.0,
        delivery_address=ADDRESS,
        confirmed_at=datetime.now(UTC),
    )


def _order_cancelled(order_id="order-001"):
    return OrderCancelled(
        order_id=order_id,
        buyer_id="buyer-001",
        seller_ids=json.dumps(["seller-001"]),
        reason="Changed my mind",
        cancelled_at=datetime.now(UTC),
    )


def _order_refunded(order_id="order-001"):
    return OrderRefunded(
        order_id=order_id,
        buyer_id="buyer-001",
        seller_ids=json.dumps(["seller-001"]),
        amount=120.0,
        refunded_at=datetime.now(UTC),
    )


def _courier(name="FarmExpress"):
    return current_domain.process(
        RegisterCourier(name=name, tracking_url_template="https://farmexpress.ph/t/{tracking_number}"),
        asynchronous=False,
    )


def _open(order_id="order-001"):
    MarketplaceOrderEventHandler().on_order_confirmed(_order_confirmed(order_id))


def _assign(order_id="order-001", courier_id=None):
    return current_domain.process(
        AssignCourier(
            order_id=order_id,
            courier_id=courier_id or _courier(),
            package=json.dumps({"weight": 3.0}),
            updated_by="admin-001",
        ),
        asynchronous=False,
    )


def _update(tracking_number, status, **kwargs):
    current_domain.process(
        UpdateShipmentStatus(tracking_number=tracking_number, status=status, updated_by="admin-001", **kwargs),
        asynchronous=False,
    )


class TestOpenFromOrder:
    def test_order_confirmed_opens_pending_shipment(self):
        _open()
        shipment = shipment_for_order("order-001")
        assert shipment.status == ShipmentStatus.PENDING.value
        assert shipment.buyer_id == "buyer-001"
        assert json.loads(shipment.delivery_address)["city"] == "Baguio"

    def test_redelivered_confirmation_opens_one_shipment(self):
        _open()
        _open()
        pending = pending_shipments()
        assert pending["total"] == 1

    def test_order_without_shipment(self):
        assert find_shipment("order-404") is None
        with pytest.raises(ObjectNotFoundError):
            shipment_for_order("order-404")


class TestCancelFromOrder:
    def test_cancelled_order_cancels_pending_shipment(self):
        _open()
        MarketplaceOrderEventHandler().on_order_cancelled(_order_cancelled())

        shipment = shipment_for_order("order-001")
        assert shipment.status == ShipmentStatus.CANCELLED.value
        assert shipment.cancellation_reason == "Changed my mind"

    def test_refunded_order_cancels_scheduled_shipment(self):
        _open()
        _assign()
        MarketplaceOrderEventHandler().on_order_refunded(_order_refunded())
        assert shipment_for_order("order-001").status == ShipmentStatus.CANCELLED.value

    def test_picked_up_shipment_is_left_alone(self):
        _open()
        tracking_number = _assign()
        _update(tracking_number, "Picked Up")
        MarketplaceOrderEventHandler().on_order_cancelled(_order_cancelled())
        assert shipment_for_order("order-001").status == ShipmentStatus.PICKED_UP.value

    def test_cancel_without_shipment_is_ignored(self):
        MarketplaceOrderEventHandler().on_order_cancelled(_order_cancelled("order-404"))
        assert find_shipment("order-404") is None


class TestAssignment:
    def test_assign_returns_tracking_number(self):
        _open()
        tracking_number = _assign()

        shipment = shipment_for_order("order-001")
        assert shipment.tracking_number == tracking_number
        assert shipment.status == ShipmentStatus.SCHEDULED.value
        assert shipment.package.weight == 3.0

    def test_assigned_shipment_leaves_pending_queue(self):
        _open("order-001")
        _open("order-002")
        _assign("order-001")
        assert [s.order_id for s in pending_shipments()["shipments"]] == ["order-002"]

    def test_inactive_courier_is_refused(self):
        _open()
        courier_id = _courier()
        current_domain.process(DeactivateCourier(courier_id=courier_id), asynchronous=False)
        with pytest.raises(ValidationError):
            _assign(courier_id=courier_id)

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _assign("order-404")


class TestTracking:
    def test_status_updates_build_history(self):
        _open()
        tracking_number = _assign()
        _update(tracking_number, "Picked Up", location="Farm gate")
        _update(tracking_number, "In Transit", location="Manila hub")

        result = track(tracking_number, "buyer-001")
        assert result["shipment"].status == ShipmentStatus.IN_TRANSIT.value
        assert result["tracking_url"] == f"https://farmexpress.ph/t/{tracking_number}"
        assert result["courier"].name == "FarmExpress"
        assert len(result["history"]) == 3

    def test_delivery_records_proof(self):
        _open()
        tracking_number = _assign()
        for status in ("Picked Up", "In Transit", "Out for Delivery"):
            _update(tracking_number, status)
        _update(tracking_number, "Delivered", received_by="Ana Cruz")

        shipment = shipment_for_order("order-001")
        assert shipment.status == ShipmentStatus.DELIVERED.value
        assert shipment.proof_of_delivery.received_by == "Ana Cruz"

    def test_unknown_tracking_number(self):
        with pytest.raises(ObjectNotFoundError):
            _update("AGF000000000", "Picked Up")

    def test_only_buyer_or_admin_tracks(self):
        _open()
        tracking_number = _assign()
        track(tracking_number, "someone-else", is_admin=True)
        with pytest.raises(AccessDenied):
            track(tracking_number, "someone-else")

    def test_order_shipping_status(self):
        assert order_shipping_status("order-001")["status"] == NOT_ASSIGNED
        _open()
        _assign()
        status = order_shipping_status("order-001")
        assert status["status"] == ShipmentStatus.SCHEDULED.value
        assert status["shipment"].courier_name == "FarmExpress"


class TestPendingQueue:
    def test_paginates_oldest_first(self):
        for n in range(3):
            _open(f"order-{n}")

        first = pending_shipments(page=1, limit=2)
        assert first["total"] == 3
        assert first["pages"] == 2
        assert [s.order_id for s in first["shipments"]] == ["order-0", "order-1"]
        assert [s.order_id for s in pending_shipments(page=2, limit=2)["shipments"]] == ["order-2"]
