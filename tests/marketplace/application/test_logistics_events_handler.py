"""Application tests for LogisticsOrderEventHandler — Marketplace reacts to Logistics events.

Covers:
- on_courier_assigned: Confirmed → Processing
- on_shipment_status_changed: Processing → Shipped on pickup, Shipped → Delivered on delivery
- redelivered or out-of-order events leave the order alone
"""

import json
from datetime import UTC, datetime

from marketplace.order.logistics_events import LogisticsOrderEventHandler
from marketplace.order.order import Order, OrderStatus
from marketplace.order.placement import PlaceOrder
from marketplace.order.seller_actions import ConfirmOrder
from marketplace.product.listing import ListProduct
from protean import current_domain
from shared.events.logistics import CourierAssigned, ShipmentStatusChanged


def _confirmed_order():
    product_id = current_domain.process(
        ListProduct(
            seller_id="seller-001",
            name="Cabbage",
            description="Highland cabbage",
            price=2.0,
            images=json.dumps(["https://cdn.example.com/p.jpg"]),
            category="Vegetables",
            unit_of_measurement="kg",
            stock=10,
        ),
        asynchronous=False,
    )
    order_id = current_domain.process(
        PlaceOrder(
            buyer_id="buyer-001",
            items=json.dumps([{"product_id": product_id, "quantity": 1}]),
            address=json.dumps({"street": "1 Road", "city": "Baguio", "zipcode": "2600", "country": "PH"}),
        ),
        asynchronous=False,
    )
    current_domain.process(ConfirmOrder(order_id=order_id, seller_id="seller-001"), asynchronous=False)
    return order_id


def _courier_assigned(order_id):
    return CourierAssigned(
        shipment_id="ship-001",
        order_id=order_id,
        buyer_id="buyer-001",
        courier_id="courier-001",
        courier_name="FarmExpress",
        tracking_number="AGF123456789",
        assigned_by="admin-001",
        assigned_at=datetime.now(UTC),
    )


def _status_changed(order_id, previous, new):
    return ShipmentStatusChanged(
        shipment_id="ship-001",
        order_id=order_id,
        buyer_id="buyer-001",
        tracking_number="AGF123456789",
        previous_status=previous,
        new_status=new,
        location="Manila hub",
        updated_by="admin-001",
        changed_at=datetime.now(UTC),
    )


def _status(order_id):
    return current_domain.repository_for(Order).get(order_id).status


class TestCourierAssigned:
    def test_moves_confirmed_order_to_processing(self):
        order_id = _confirmed_order()
        LogisticsOrderEventHandler().on_courier_assigned(_courier_assigned(order_id))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PROCESSING.value
        assert any("FarmExpress" in (t.note or "") for t in order.tracking_history)

    def test_redelivered_assignment_is_ignored(self):
        order_id = _confirmed_order()
        handler = LogisticsOrderEventHandler()
        handler.on_courier_assigned(_courier_assigned(order_id))
        handler.on_courier_assigned(_courier_assigned(order_id))
        assert _status(order_id) == OrderStatus.PROCESSING.value


class TestShipmentStatusChanged:
    def test_pickup_ships_the_order(self):
        order_id = _confirmed_order()
        handler = LogisticsOrderEventHandler()
        handler.on_courier_assigned(_courier_assigned(order_id))
        handler.on_shipment_status_changed(_status_changed(order_id, "Scheduled", "Picked Up"))
        assert _status(order_id) == OrderStatus.SHIPPED.value

    def test_in_transit_after_pickup_changes_nothing(self):
        order_id = _confirmed_order()
        handler = LogisticsOrderEventHandler()
        handler.on_courier_assigned(_courier_assigned(order_id))
        handler.on_shipment_status_changed(_status_changed(order_id, "Scheduled", "Picked Up"))
        handler.on_shipment_status_changed(_status_changed(order_id, "Picked Up", "In Transit"))
        assert _status(order_id) == OrderStatus.SHIPPED.value

    def test_delivery_completes_the_order(self):
        order_id = _confirmed_order()
        handler = LogisticsOrderEventHandler()
        handler.on_courier_assigned(_courier_assigned(order_id))
        handler.on_shipment_status_changed(_status_changed(order_id, "Scheduled", "Picked Up"))
        handler.on_shipment_status_changed(_status_changed(order_id, "Out for Delivery", "Delivered"))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.is_paid is True

    def test_delivery_before_shipping_is_ignored(self):
        order_id = _confirmed_order()
        LogisticsOrderEventHandler().on_shipment_status_changed(
            _status_changed(order_id, "Out for Delivery", "Delivered")
        )
        assert _status(order_id) == OrderStatus.CONFIRMED.value
