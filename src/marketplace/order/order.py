"""Order aggregate — a buyer's purchase from one or more sellers.

Line items carry a snapshot of the product (name, price, image, seller) taken
when the order was placed. Stock for every line is already out of the product
by then: either deducted at placement or carried over from the cart's
reservation. Any path that ends the order early (seller rejection, buyer
cancellation, approved refund) hands the units back, and each item remembers
whether its stock has been restored so no unit is returned twice.

State Machine:
    PENDING_CONFIRMATION → CONFIRMED | REJECTED | CANCELLED
    CONFIRMED → PROCESSING | CANCELLED | REFUNDED
    PROCESSING → SHIPPED | REFUNDED
    SHIPPED → DELIVERED

Sellers decide their own items. The order settles once no item is pending:
Confirmed if any item was confirmed, Rejected otherwise.
"""

import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderItemsProcessed,
    OrderPlaced,
    OrderProcessing,
    OrderRefunded,
    OrderRejected,
    OrderShipped,
    RefundRejected,
    RefundRequested,
)
from shared.access import AccessDenied

# Buyers may cancel for this many hours after placing the order
CANCELLATION_TIME_LIMIT = 2


class OrderStatus(Enum):
    PENDING_CONFIRMATION = "Pending Confirmation"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class ItemStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"


class SellerActionType(Enum):
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    SHIPPED = "shipped"
    REFUNDED = "refunded"


class RefundStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ItemDecision(Enum):
    CONFIRM = "confirm"
    REJECT = "reject"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING_CONFIRMATION: {OrderStatus.CONFIRMED, OrderStatus.REJECTED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.REFUNDED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.REJECTED: set(),
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
}

_CANCELLABLE_STATES = {OrderStatus.PENDING_CONFIRMATION, OrderStatus.CONFIRMED}
_REFUNDABLE_STATES = {OrderStatus.CONFIRMED, OrderStatus.PROCESSING}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order goes, frozen at placement time."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zipcode = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(max_length=30)

    def one_line(self):
        return f"{self.street}, {self.city}, {self.state or ''} {self.zipcode}, {self.country}"


@marketplace.value_object(part_of="Order")
class CancellationDetails:
    reason = String(max_length=500)
    cancelled_by = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@marketplace.value_object(part_of="Order")
class RefundRequest:
    status = String(required=True, choices=RefundStatus)
    reason = String(max_length=500)
    amount = Float(default=0.0)
    requested_at = DateTime(required=True)
    resolved_at = DateTime()
    resolved_by = Identifier()
    resolution_note = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1)
    item_status = String(choices=ItemStatus, default=ItemStatus.PENDING.value)
    stock_restored = Boolean(default=False)


@marketplace.entity(part_of="Order")
class TrackingEntry:
    status = String(required=True, max_length=50)
    note = String(max_length=500)
    updated_by = Identifier()
    timestamp = DateTime(required=True)


@marketplace.entity(part_of="Order")
class SellerAction:
    seller_id = Identifier(required=True)
    action = String(required=True, choices=SellerActionType)
    reason = String(max_length=500)
    item_ids = Text()  # JSON list of order item ids
    timestamp = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING_CONFIRMATION.value)
    items = HasMany(OrderItem)
    address = ValueObject(DeliveryAddress)
    payment_method = String(max_length=50, default="COD")
    is_paid = Boolean(default=False)
    amount = Float(default=0.0)
    seller_ids = Text()  # JSON list, for lookups without loading items
    tracking_history = HasMany(TrackingEntry)
    seller_actions = HasMany(SellerAction)
    cancellation = ValueObject(CancellationDetails)
    refund_request = ValueObject(RefundRequest)
    placed_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, buyer_id, lines, address, payment_method="COD"):
        """Create an order from product snapshots.

        Args:
            buyer_id: The purchasing user.
            lines: List of dicts with product_id, seller_id, name, price, image, quantity.
            address: Dict with street, city, state, zipcode, country, phone.
            payment_method: Defaults to cash on delivery.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        seller_ids = sorted({str(line["seller_id"]) for line in lines})
        order = cls(
            buyer_id=buyer_id,
            status=OrderStatus.PENDING_CONFIRMATION.value,
            items=[OrderItem(**line) for line in lines],
            address=DeliveryAddress(**address),
            payment_method=payment_method or "COD",
            amount=round(sum(line["price"] * line["quantity"] for line in lines), 2),
            seller_ids=json.dumps(seller_ids),
            placed_at=now,
            updated_at=now,
        )
        order._track(OrderStatus.PENDING_CONFIRMATION.value, "Order placed", buyer_id, now)

        seller_item_counts = {}
        for item in order.items:
            seller_item_counts[str(item.seller_id)] = seller_item_counts.get(str(item.seller_id), 0) + 1

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(buyer_id),
                items=json.dumps([_item_dict(i) for i in order.items]),
                seller_item_counts=json.dumps(seller_item_counts),
                amount=order.amount,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _track(self, status, note, updated_by, timestamp=None):
        timestamp = timestamp or datetime.now(UTC)
        self.add_tracking_history(
            TrackingEntry(status=status, note=note, updated_by=updated_by, timestamp=timestamp)
        )
        self.updated_at = timestamp

    def _move_to(self, target_status, note, updated_by):
        self._assert_can_transition(target_status)
        now = datetime.now(UTC)
        self.status = target_status.value
        self._track(target_status.value, note, updated_by, now)
        return now

    def _release_items(self, items):
        """Flag items as restocked and return ``(product_id, quantity)`` pairs to release."""
        released = []
        for item in items:
            if item.stock_restored:
                continue
            item.stock_restored = True
            released.append((str(item.product_id), item.quantity))
        return released

    @property
    def involved_sellers(self):
        return json.loads(self.seller_ids) if self.seller_ids else []

    def items_of(self, seller_id):
        return [i for i in self.items if str(i.seller_id) == str(seller_id)]

    def is_buyer(self, user_id):
        return str(user_id) == str(self.buyer_id)

    def assert_visible_to(self, user_id, is_admin=False):
        if is_admin or self.is_buyer(user_id) or str(user_id) in self.involved_sellers:
            return
        raise AccessDenied("You are not allowed to view this order")

    # -------------------------------------------------------------------
    # Seller decisions
    # -------------------------------------------------------------------
    def confirm_by_seller(self, seller_id, note=None):
        decisions = {str(i.id): ItemDecision.CONFIRM.value for i in self._pending_items_of(seller_id)}
        return self.process_items(seller_id, decisions, reason=note)

    def reject_by_seller(self, seller_id, reason):
        decisions = {str(i.id): ItemDecision.REJECT.value for i in self._pending_items_of(seller_id)}
        return self.process_items(seller_id, decisions, reason=reason)

    def _pending_items_of(self, seller_id):
        own = self.items_of(seller_id)
        if not own:
            raise AccessDenied("This order has no items from you")
        pending = [i for i in own if i.item_status == ItemStatus.PENDING.value]
        if not pending:
            raise ValidationError({"items": ["You have already processed your items in this order"]})
        return pending

    def process_items(self, seller_id, decisions, reason=None):
        """Apply per-item confirm/reject decisions from one seller.

        Returns the ``(product_id, quantity)`` pairs whose stock must go back
        to the products (the rejected items).
        """
        if not self.items_of(seller_id):
            raise AccessDenied("This order has no items from you")
        if OrderStatus(self.status) != OrderStatus.PENDING_CONFIRMATION:
            raise ValidationError({"status": [f"Cannot process items of an order that is {self.status}"]})
        if not decisions:
            raise ValidationError({"items": ["No item decisions given"]})

        own = {str(i.id): i for i in self.items_of(seller_id)}
        confirmed, rejected = [], []
        for item_id, decision in decisions.items():
            item = own.get(str(item_id))
            if item is None:
                raise ValidationError({"item_id": [f"Item {item_id} is not one of your items in this order"]})
            if item.item_status != ItemStatus.PENDING.value:
                raise ValidationError({"item_id": [f"Item {item_id} has already been processed"]})
            if decision == ItemDecision.CONFIRM.value:
                confirmed.append(item)
            elif decision == ItemDecision.REJECT.value:
                rejected.append(item)
            else:
                raise ValidationError({"action": [f"Unknown action '{decision}', expected confirm or reject"]})

        now = datetime.now(UTC)
        for item in confirmed:
            item.item_status = ItemStatus.CONFIRMED.value
        for item in rejected:
            item.item_status = ItemStatus.REJECTED.value
        released = self._release_items(rejected)

        for action, items in ((SellerActionType.CONFIRMED, confirmed), (SellerActionType.REJECTED, rejected)):
            if items:
                self.add_seller_actions(
                    SellerAction(
                        seller_id=seller_id,
                        action=action.value,
                        reason=reason,
                        item_ids=json.dumps([str(i.id) for i in items]),
                        timestamp=now,
                    )
                )
        self._track(
            self.status,
            f"Seller confirmed {len(confirmed)} item(s) and rejected {len(rejected)} item(s)",
            seller_id,
            now,
        )

        self.raise_(
            OrderItemsProcessed(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_id=str(seller_id),
                confirmed_item_ids=json.dumps([str(i.id) for i in confirmed]),
                rejected_item_ids=json.dumps([str(i.id) for i in rejected]),
                reason=reason,
                processed_at=now,
            )
        )
        self._settle(seller_id, reason)
        return released

    def _settle(self, seller_id, reason):
        """Close the confirmation phase once every item has a decision."""
        if any(i.item_status == ItemStatus.PENDING.value for i in self.items):
            return

        if any(i.item_status == ItemStatus.CONFIRMED.value for i in self.items):
            now = self._move_to(OrderStatus.CONFIRMED, "Order confirmed by seller", seller_id)
            self.raise_(
                OrderConfirmed(
                    order_id=str(self.id),
                    buyer_id=str(self.buyer_id),
                    seller_ids=self.seller_ids,
                    amount=self.amount,
                    delivery_address=json.dumps(self.address.to_dict()) if self.address else None,
                    confirmed_at=now,
                )
            )
        else:
            now = self._move_to(OrderStatus.REJECTED, reason or "Order rejected by seller", seller_id)
            self.raise_(
                OrderRejected(
                    order_id=str(self.id),
                    buyer_id=str(self.buyer_id),
                    rejected_by=str(seller_id),
                    reason=reason,
                    rejected_at=now,
                )
            )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancellation_window(self, now=None):
        """How much of the cancellation window is left.

        Returns a dict with ``can_cancel``, ``hours_passed`` (whole hours) and
        ``time_remaining`` (hours, never negative).
        """
        now = now or datetime.now(UTC)
        elapsed_hours = (now - _aware(self.placed_at)).total_seconds() / 3600
        return {
            "can_cancel": (
                elapsed_hours <= CANCELLATION_TIME_LIMIT and OrderStatus(self.status) in _CANCELLABLE_STATES
            ),
            "hours_passed": math.floor(elapsed_hours),
            "time_remaining": round(max(0.0, CANCELLATION_TIME_LIMIT - elapsed_hours), 2),
        }

    def cancel(self, buyer_id, reason=None, now=None):
        """Buyer-initiated cancellation. Returns the stock to release."""
        if not self.is_buyer(buyer_id):
            raise AccessDenied("Only the buyer can cancel this order")

        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise ValidationError(
                {
                    "status": [
                        f"Cannot cancel order in {current.value} state. "
                        f"Cancellation is only allowed from: "
                        f"{', '.join(sorted(s.value for s in _CANCELLABLE_STATES))}"
                    ]
                }
            )

        if not self.cancellation_window(now)["can_cancel"]:
            raise ValidationError(
                {"placed_at": [f"Orders can only be cancelled within {CANCELLATION_TIME_LIMIT} hours of placing them"]}
            )

        cancelled_at = self._move_to(OrderStatus.CANCELLED, reason or "Cancelled by buyer", buyer_id)
        self.cancellation = CancellationDetails(reason=reason, cancelled_by=buyer_id, cancelled_at=cancelled_at)
        released = self._release_items(self.items)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_ids=self.seller_ids,
                reason=reason,
                cancelled_at=cancelled_at,
            )
        )
        return released

    # -------------------------------------------------------------------
    # Delivery progress (driven by the shipment)
    # -------------------------------------------------------------------
    def mark_processing(self, note=None, updated_by=None):
        now = self._move_to(OrderStatus.PROCESSING, note or "Handed to courier", updated_by)
        self.raise_(OrderProcessing(order_id=str(self.id), buyer_id=str(self.buyer_id), note=note, started_at=now))

    def mark_shipped(self, note=None, updated_by=None):
        now = self._move_to(OrderStatus.SHIPPED, note or "Shipped", updated_by)
        for seller_id in self.involved_sellers:
            self.add_seller_actions(
                SellerAction(seller_id=seller_id, action=SellerActionType.SHIPPED.value, timestamp=now)
            )
        self.raise_(OrderShipped(order_id=str(self.id), buyer_id=str(self.buyer_id), note=note, shipped_at=now))

    def mark_delivered(self, note=None, updated_by=None):
        now = self._move_to(OrderStatus.DELIVERED, note or "Delivered", updated_by)
        if self.payment_method == "COD":
            self.is_paid = True
        self.raise_(OrderDelivered(order_id=str(self.id), buyer_id=str(self.buyer_id), delivered_at=now))

    # -------------------------------------------------------------------
    # Refunds
    # -------------------------------------------------------------------
    def request_refund(self, buyer_id, reason):
        if not self.is_buyer(buyer_id):
            raise AccessDenied("Only the buyer can request a refund")
        if OrderStatus(self.status) not in _REFUNDABLE_STATES:
            raise ValidationError({"status": [f"Cannot request a refund for an order that is {self.status}"]})
        if self.refund_request and self.refund_request.status == RefundStatus.PENDING.value:
            raise ValidationError({"refund_request": ["A refund request is already pending"]})

        now = datetime.now(UTC)
        refundable = round(
            sum(i.price * i.quantity for i in self.items if i.item_status != ItemStatus.REJECTED.value), 2
        )
        self.refund_request = RefundRequest(
            status=RefundStatus.PENDING.value,
            reason=reason,
            amount=refundable,
            requested_at=now,
        )
        self.updated_at = now
        self.raise_(
            RefundRequested(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_ids=self.seller_ids,
                reason=reason,
                amount=refundable,
                requested_at=now,
            )
        )

    def resolve_refund(self, actor_id, approve, note=None, is_admin=False):
        """Approve or reject a pending refund. Returns stock to release on approval."""
        if not is_admin and str(actor_id) not in self.involved_sellers:
            raise AccessDenied("Only a seller on this order can resolve its refund")
        if not self.refund_request or self.refund_request.status != RefundStatus.PENDING.value:
            raise ValidationError({"refund_request": ["There is no pending refund request"]})

        if not approve:
            now = datetime.now(UTC)
            self.refund_request = _resolved(self.refund_request, RefundStatus.REJECTED, actor_id, note, now)
            self.updated_at = now
            self.raise_(
                RefundRejected(order_id=str(self.id), buyer_id=str(self.buyer_id), note=note, resolved_at=now)
            )
            return []

        now = self._move_to(OrderStatus.REFUNDED, note or "Refund approved", actor_id)
        self.refund_request = _resolved(self.refund_request, RefundStatus.APPROVED, actor_id, note, now)
        self.add_seller_actions(
            SellerAction(seller_id=actor_id, action=SellerActionType.REFUNDED.value, reason=note, timestamp=now)
        )
        released = self._release_items(self.items)
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_ids=self.seller_ids,
                amount=self.refund_request.amount,
                refunded_at=now,
            )
        )
        return released

    # -------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------
    def history(self):
        """Tracking entries, seller actions and refund milestones, newest first."""
        entries = [
            {
                "type": "status",
                "status": t.status,
                "note": t.note,
                "actor_id": str(t.updated_by) if t.updated_by else None,
                "timestamp": t.timestamp,
            }
            for t in self.tracking_history
        ]
        entries.extend(
            {
                "type": "seller_action",
                "status": a.action,
                "note": a.reason,
                "actor_id": str(a.seller_id),
                "timestamp": a.timestamp,
            }
            for a in self.seller_actions
        )
        if self.refund_request:
            entries.append(
                {
                    "type": "refund",
                    "status": "requested",
                    "note": self.refund_request.reason,
                    "actor_id": str(self.buyer_id),
                    "timestamp": self.refund_request.requested_at,
                }
            )
            if self.refund_request.resolved_at:
                entries.append(
                    {
                        "type": "refund",
                        "status": self.refund_request.status,
                        "note": self.refund_request.resolution_note,
                        "actor_id": str(self.refund_request.resolved_by),
                        "timestamp": self.refund_request.resolved_at,
                    }
                )
        return sorted(entries, key=lambda e: _aware(e["timestamp"]), reverse=True)


def _item_dict(item):
    return {
        "item_id": str(item.id),
        "product_id": str(item.product_id),
        "seller_id": str(item.seller_id),
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
    }


def _resolved(request, status, actor_id, note, now):
    return RefundRequest(
        status=status.value,
        reason=request.reason,
        amount=request.amount,
        requested_at=request.requested_at,
        resolved_at=now,
        resolved_by=actor_id,
        resolution_note=note,
    )


def _aware(value):
    """Treat naive datetimes read back from storage as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)
