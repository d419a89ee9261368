"""Shipment aggregate — the one delivery record for an order.

State Machine:
    PENDING → SCHEDULED | CANCELLED
    SCHEDULED → PICKED_UP | CANCELLED
    PICKED_UP → IN_TRANSIT
    IN_TRANSIT → OUT_FOR_DELIVERY | FAILED_DELIVERY
    OUT_FOR_DELIVERY → DELIVERED | FAILED_DELIVERY
    FAILED_DELIVERY → OUT_FOR_DELIVERY | RETURNED
"""

import json
import random
import time
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, String, Text, ValueObject

from logistics.domain import logistics
from logistics.shipment.events import CourierAssigned, ShipmentCancelled, ShipmentCreated, ShipmentStatusChanged
from shared.access import AccessDenied

TRACKING_PREFIX = "AGF"


class ShipmentStatus(Enum):
    PENDING = "Pending"
    SCHEDULED = "Scheduled"
    PICKED_UP = "Picked Up"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    FAILED_DELIVERY = "Failed Delivery"
    RETURNED = "Returned"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    ShipmentStatus.PENDING: {ShipmentStatus.SCHEDULED, ShipmentStatus.CANCELLED},
    ShipmentStatus.SCHEDULED: {ShipmentStatus.PICKED_UP, ShipmentStatus.CANCELLED},
    ShipmentStatus.PICKED_UP: {ShipmentStatus.IN_TRANSIT},
    ShipmentStatus.IN_TRANSIT: {ShipmentStatus.OUT_FOR_DELIVERY, ShipmentStatus.FAILED_DELIVERY},
    ShipmentStatus.OUT_FOR_DELIVERY: {ShipmentStatus.DELIVERED, ShipmentStatus.FAILED_DELIVERY},
    ShipmentStatus.FAILED_DELIVERY: {ShipmentStatus.OUT_FOR_DELIVERY, ShipmentStatus.RETURNED},
    ShipmentStatus.DELIVERED: set(),
    ShipmentStatus.RETURNED: set(),
    ShipmentStatus.CANCELLED: set(),
}


def generate_tracking_number():
    """``AGF`` + last 6 digits of the epoch-millis clock + 3 random digits."""
    millis = str(int(time.time() * 1000))[-6:]
    return f"{TRACKING_PREFIX}{millis}{random.randint(0, 999):03d}"


def _aware(value):
    """Treat naive datetimes read back from storage as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@logistics.value_object(part_of="Shipment")
class PackageInfo:
    weight = Float(min_value=0.0)  # kg
    length = Float(min_value=0.0)
    width = Float(min_value=0.0)
    height = Float(min_value=0.0)


@logistics.value_object(part_of="Shipment")
class ProofOfDelivery:
    received_by = String(max_length=150)
    photo_url = String(max_length=1000)
    delivered_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@logistics.entity(part_of="Shipment")
class LocationUpdate:
    status = String(required=True, max_length=50)
    location = String(max_length=255)
    notes = String(max_length=500)
    updated_by = Identifier()
    timestamp = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@logistics.aggregate
class Shipment:
    order_id = Identifier(required=True, unique=True)
    buyer_id = Identifier(required=True)
    seller_ids = Text()  # JSON list
    courier_id = Identifier()
    courier_name = String(max_length=150)
    tracking_number = String(max_length=20)
    status = String(choices=ShipmentStatus, default=ShipmentStatus.PENDING.value)
    shipping_method = String(max_length=50, default="Standard")
    estimated_delivery = DateTime()
    instructions = String(max_length=500)
    needs_refrigeration = Boolean(default=False)
    insurance_amount = Float(default=0.0)
    is_contactless = Boolean(default=False)
    delivery_address = Text()  # JSON address dict
    package = ValueObject(PackageInfo)
    shipping_cost = Float(default=0.0)
    location_history = HasMany(LocationUpdate)
    proof_of_delivery = ValueObject(ProofOfDelivery)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open_for_order(cls, order_id, buyer_id, seller_ids=None, delivery_address=None):
        now = datetime.now(UTC)
        shipment = cls(
            order_id=order_id,
            buyer_id=buyer_id,
            seller_ids=json.dumps(list(seller_ids or [])),
            delivery_address=delivery_address,
            status=ShipmentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        shipment.raise_(
            ShipmentCreated(
                shipment_id=str(shipment.id),
                order_id=str(order_id),
                buyer_id=str(buyer_id),
                created_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = ShipmentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _log_location(self, status, location, notes, updated_by, timestamp):
        self.add_location_history(
            LocationUpdate(
                status=status,
                location=location,
                notes=notes,
                updated_by=updated_by,
                timestamp=timestamp,
            )
        )
        self.updated_at = timestamp

    def assert_trackable_by(self, user_id, is_admin=False):
        if is_admin or str(user_id) == str(self.buyer_id):
            return
        raise AccessDenied("Only the buyer or an admin can track this shipment")

    @property
    def is_cancellable(self):
        return ShipmentStatus.CANCELLED in _VALID_TRANSITIONS[ShipmentStatus(self.status)]

    def history(self):
        return sorted(self.location_history, key=lambda u: _aware(u.timestamp), reverse=True)

    # -------------------------------------------------------------------
    # Courier assignment
    # -------------------------------------------------------------------
    def assign_courier(
        self,
        courier,
        shipping_method=None,
        estimated_delivery=None,
        instructions=None,
        needs_refrigeration=False,
        insurance_amount=0.0,
        is_contactless=False,
        package=None,
        shipping_cost=None,
        updated_by=None,
    ):
        courier.assert_active()
        self._assert_can_transition(ShipmentStatus.SCHEDULED)

        now = datetime.now(UTC)
        self.courier_id = str(courier.id)
        self.courier_name = courier.name
        self.tracking_number = generate_tracking_number()
        self.status = ShipmentStatus.SCHEDULED.value
        self.shipping_method = shipping_method or self.shipping_method or "Standard"
        self.estimated_delivery = estimated_delivery
        self.instructions = instructions
        self.needs_refrigeration = bool(needs_refrigeration)
        self.insurance_amount = insurance_amount or 0.0
        self.is_contactless = bool(is_contactless)
        if package:
            self.package = PackageInfo(**package)
        if shipping_cost is not None:
            self.shipping_cost = shipping_cost
        self._log_location(
            ShipmentStatus.SCHEDULED.value,
            None,
            f"Assigned to {courier.name}",
            updated_by,
            now,
        )
        self.raise_(
            CourierAssigned(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                buyer_id=str(self.buyer_id),
                courier_id=str(courier.id),
                courier_name=courier.name,
                tracking_number=self.tracking_number,
                estimated_delivery=estimated_delivery,
                assigned_by=updated_by,
                assigned_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------
    def update_status(self, status, location=None, notes=None, updated_by=None, received_by=None, photo_url=None):
        try:
            target = ShipmentStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown shipment status '{status}'"]}) from None
        if target == ShipmentStatus.CANCELLED:
            raise ValidationError({"status": ["Shipments are cancelled through their order"]})
        self._assert_can_transition(target)

        now = datetime.now(UTC)
        previous = self.status
        self.status = target.value
        if target == ShipmentStatus.DELIVERED:
            self.proof_of_delivery = ProofOfDelivery(received_by=received_by, photo_url=photo_url, delivered_at=now)
        self._log_location(target.value, location, notes, updated_by, now)
        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                buyer_id=str(self.buyer_id),
                tracking_number=self.tracking_number,
                previous_status=previous,
                new_status=target.value,
                location=location,
                notes=notes,
                updated_by=updated_by,
                changed_at=now,
            )
        )

    def cancel(self, reason=None):
        self._assert_can_transition(ShipmentStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = ShipmentStatus.CANCELLED.value
        self.cancellation_reason = reason
        self._log_location(ShipmentStatus.CANCELLED.value, None, reason, None, now)
        self.raise_(
            ShipmentCancelled(
                shipment_id=str(self.id),
                order_id=str(self.order_id),
                reason=reason,
                cancelled_at=now,
            )
        )
