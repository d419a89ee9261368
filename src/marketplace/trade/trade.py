"""Trade aggregate — a two-party barter between sellers.

A trade never transfers ownership of the original listings. Completing one
deducts the agreed quantities from both products and mints two new products,
one per recipient, each carrying an ``origin`` back-link to the trade. Every
stock movement is written to ``audit_entries`` so the before/after numbers are
queryable instead of buried in a free-text notes field.

State Machine:
    PENDING → ACCEPTED → COMPLETED
    PENDING → REJECTED | CANCELLED
    ACCEPTED → CANCELLED   (only when a referenced product is withdrawn or deleted)
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from marketplace.domain import marketplace
from marketplace.trade.events import (
    TradeAccepted,
    TradeCancelled,
    TradeCompleted,
    TradeInitiated,
    TradeRejected,
    TradeUpdated,
)
from shared.access import AccessDenied


class TradeStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AuditAction(Enum):
    STOCK_DEDUCTED = "stock_deducted"
    PRODUCT_CREATED = "product_created"


_VALID_TRANSITIONS = {
    TradeStatus.PENDING: {TradeStatus.ACCEPTED, TradeStatus.REJECTED, TradeStatus.CANCELLED},
    TradeStatus.ACCEPTED: {TradeStatus.COMPLETED, TradeStatus.CANCELLED},
    TradeStatus.REJECTED: set(),
    TradeStatus.COMPLETED: set(),
    TradeStatus.CANCELLED: set(),
}

# Trades still holding a claim on a product's stock
OPEN_STATUSES = (TradeStatus.PENDING.value, TradeStatus.ACCEPTED.value)


def compute_fairness(price_from, quantity_from, price_to, quantity_to):
    """Value comparison of the two sides. Informational only, never enforced."""
    offered = price_from * quantity_from
    requested = price_to * quantity_to
    ratio = round(offered / requested, 2) if requested else 0.0
    return TradeFairness(
        offered_value=offered,
        requested_value=requested,
        value_difference=abs(offered - requested),
        value_ratio=ratio,
    )


@marketplace.value_object(part_of="Trade")
class TradeFairness:
    offered_value = Float(default=0.0)
    requested_value = Float(default=0.0)
    value_difference = Float(default=0.0)
    value_ratio = Float(default=0.0)


@marketplace.entity(part_of="Trade")
class TradeAuditEntry:
    """One stock movement or product creation caused by the trade."""

    action = String(required=True, choices=AuditAction)
    actor_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=0)
    stock_before = Integer()
    stock_after = Integer()
    details = String(max_length=500)
    recorded_at = DateTime()


@marketplace.aggregate
class Trade:
    seller_from = Identifier(required=True)
    seller_to = Identifier(required=True)
    product_from_id = Identifier(required=True)
    product_to_id = Identifier(required=True)
    quantity_from = Integer(required=True, min_value=1)
    quantity_to = Integer(required=True, min_value=1)
    status = String(choices=TradeStatus, default=TradeStatus.PENDING.value)
    message = Text()
    fairness = ValueObject(TradeFairness)
    rejection_reason = String(max_length=500)
    cancellation_reason = String(max_length=500)
    cancelled_by = Identifier()
    derived_product_for_receiver_id = Identifier()
    derived_product_for_initiator_id = Identifier()
    audit_entries = HasMany(TradeAuditEntry)
    created_at = DateTime()
    accepted_at = DateTime()
    rejected_at = DateTime()
    cancelled_at = DateTime()
    completed_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def initiate(cls, product_from, product_to, seller_from, seller_to, quantity_from, quantity_to=None, message=None):
        """Open a trade offer after checking both listings.

        ``product_from`` / ``product_to`` are loaded Product aggregates. Ownership
        mismatches surface as not-found, mirroring how the listing is looked up
        "as owned by" each party.
        """
        if str(seller_from) == str(seller_to):
            raise ValidationError({"seller_to": ["Cannot trade with yourself"]})

        _assert_tradeable(product_from, seller_from, "product_from")
        _assert_tradeable(product_to, seller_to, "product_to")

        quantity_to = quantity_to or quantity_from
        _assert_quantity(product_from, quantity_from, "quantity_from")
        _assert_quantity(product_to, quantity_to, "quantity_to")

        now = datetime.now(UTC)
        trade = cls(
            seller_from=seller_from,
            seller_to=seller_to,
            product_from_id=str(product_from.id),
            product_to_id=str(product_to.id),
            quantity_from=quantity_from,
            quantity_to=quantity_to,
            message=message,
            status=TradeStatus.PENDING.value,
            fairness=compute_fairness(product_from.price, quantity_from, product_to.price, quantity_to),
            created_at=now,
            updated_at=now,
        )
        trade.raise_(
            TradeInitiated(
                trade_id=str(trade.id),
                seller_from=str(seller_from),
                seller_to=str(seller_to),
                product_from_id=str(product_from.id),
                product_to_id=str(product_to.id),
                product_from_name=product_from.name,
                product_to_name=product_to.name,
                quantity_from=quantity_from,
                quantity_to=quantity_to,
                value_ratio=trade.fairness.value_ratio,
                initiated_at=now,
            )
        )
        return trade

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = TradeStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_initiator(self, actor_id):
        if str(actor_id) != str(self.seller_from):
            raise AccessDenied("Only the seller who initiated the trade can do that")

    def _assert_receiver(self, actor_id):
        if str(actor_id) != str(self.seller_to):
            raise AccessDenied("Only the seller who received the trade can do that")

    def is_party(self, actor_id):
        return str(actor_id) in (str(self.seller_from), str(self.seller_to))

    def assert_party(self, actor_id):
        if not self.is_party(actor_id):
            raise AccessDenied("Only the trading parties can access this trade")

    def references(self, product_id):
        return str(product_id) in (str(self.product_from_id), str(self.product_to_id))

    # -------------------------------------------------------------------
    # Negotiation
    # -------------------------------------------------------------------
    def revise(self, actor_id, product_from, product_to, quantity_from=None, quantity_to=None, message=None):
        """Change quantities or message on a pending offer and recompute fairness."""
        self._assert_initiator(actor_id)
        if TradeStatus(self.status) != TradeStatus.PENDING:
            raise ValidationError({"status": ["Only pending trades can be updated"]})

        new_from = quantity_from or self.quantity_from
        new_to = quantity_to or self.quantity_to
        _assert_quantity(product_from, new_from, "quantity_from")
        _assert_quantity(product_to, new_to, "quantity_to")

        self.quantity_from = new_from
        self.quantity_to = new_to
        if message is not None:
            self.message = message
        self.fairness = compute_fairness(product_from.price, new_from, product_to.price, new_to)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            TradeUpdated(
                trade_id=str(self.id),
                seller_from=str(self.seller_from),
                seller_to=str(self.seller_to),
                quantity_from=new_from,
                quantity_to=new_to,
                value_ratio=self.fairness.value_ratio,
                updated_at=self.updated_at,
            )
        )

    def accept(self, actor_id, product_from):
        self._assert_receiver(actor_id)
        self._assert_can_transition(TradeStatus.ACCEPTED)
        if product_from.is_deleted or product_from.stock < self.quantity_from:
            raise ValidationError({"product_from": ["The offered product no longer has enough stock"]})

        now = datetime.now(UTC)
        self.status = TradeStatus.ACCEPTED.value
        self.accepted_at = now
        self.updated_at = now
        self.raise_(
            TradeAccepted(
                trade_id=str(self.id),
                seller_from=str(self.seller_from),
                seller_to=str(self.seller_to),
                accepted_at=now,
            )
        )

    def reject(self, actor_id, reason=None):
        self._assert_receiver(actor_id)
        self._assert_can_transition(TradeStatus.REJECTED)

        now = datetime.now(UTC)
        self.status = TradeStatus.REJECTED.value
        self.rejection_reason = reason
        self.rejected_at = now
        self.updated_at = now
        self.raise_(
            TradeRejected(
                trade_id=str(self.id),
                seller_from=str(self.seller_from),
                seller_to=str(self.seller_to),
                reason=reason,
                rejected_at=now,
            )
        )

    def cancel(self, actor_id, reason=None):
        """Initiator withdraws a pending offer."""
        self._assert_initiator(actor_id)
        if TradeStatus(self.status) != TradeStatus.PENDING:
            raise ValidationError({"status": ["Only pending trades can be cancelled"]})
        self._mark_cancelled(actor_id, reason)

    def force_cancel(self, reason, cancelled_by):
        """Cancel because a referenced product left the market. Allowed while pending or accepted."""
        self._assert_can_transition(TradeStatus.CANCELLED)
        self._mark_cancelled(cancelled_by, reason)

    def _mark_cancelled(self, cancelled_by, reason):
        now = datetime.now(UTC)
        self.status = TradeStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.cancelled_by = cancelled_by
        self.cancelled_at = now
        self.updated_at = now
        self.raise_(
            TradeCancelled(
                trade_id=str(self.id),
                seller_from=str(self.seller_from),
                seller_to=str(self.seller_to),
                cancelled_by=str(cancelled_by),
                reason=reason,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------
    def complete(self, actor_id, product_from, product_to):
        """Swap the goods and return the two derived products to persist.

        Mutates both loaded products in place: the caller is expected to add
        the two originals and the two returned derivatives to their repository
        within the same Unit of Work.
        """
        self.assert_party(actor_id)
        self._assert_can_transition(TradeStatus.COMPLETED)

        for product, quantity, side in (
            (product_from, self.quantity_from, "product_from"),
            (product_to, self.quantity_to, "product_to"),
        ):
            if product.is_deleted or product.stock < quantity:
                raise ValidationError({side: [f"Insufficient stock on {product.name} to complete the trade"]})

        trade_id = str(self.id)
        from_before, to_before = product_from.stock, product_to.stock

        product_from.hand_over_for_trade(
            trade_id, self.quantity_from, traded_to=self.seller_to, traded_from=self.seller_from
        )
        product_to.hand_over_for_trade(
            trade_id, self.quantity_to, traded_to=self.seller_from, traded_from=self.seller_to
        )

        for_receiver = product_from.derive_for(self.seller_to, self.quantity_from, trade_id)
        for_initiator = product_to.derive_for(self.seller_from, self.quantity_to, trade_id)

        now = datetime.now(UTC)
        self._audit(AuditAction.STOCK_DEDUCTED, actor_id, product_from, self.quantity_from, from_before, now)
        self._audit(AuditAction.STOCK_DEDUCTED, actor_id, product_to, self.quantity_to, to_before, now)
        self._audit(AuditAction.PRODUCT_CREATED, actor_id, for_receiver, self.quantity_from, 0, now)
        self._audit(AuditAction.PRODUCT_CREATED, actor_id, for_initiator, self.quantity_to, 0, now)

        self.status = TradeStatus.COMPLETED.value
        self.derived_product_for_receiver_id = str(for_receiver.id)
        self.derived_product_for_initiator_id = str(for_initiator.id)
        self.completed_at = now
        self.updated_at = now
        self.raise_(
            TradeCompleted(
                trade_id=trade_id,
                seller_from=str(self.seller_from),
                seller_to=str(self.seller_to),
                completed_by=str(actor_id),
                product_from_id=str(product_from.id),
                product_to_id=str(product_to.id),
                quantity_from=self.quantity_from,
                quantity_to=self.quantity_to,
                derived_product_for_receiver_id=str(for_receiver.id),
                derived_product_for_initiator_id=str(for_initiator.id),
                completed_at=now,
            )
        )
        return for_receiver, for_initiator

    def _audit(self, action, actor_id, product, quantity, stock_before, recorded_at):
        self.add_audit_entries(
            TradeAuditEntry(
                action=action.value,
                actor_id=actor_id,
                product_id=str(product.id),
                quantity=quantity,
                stock_before=stock_before,
                stock_after=product.stock,
                details=f"{product.name} ({product.unit_of_measurement})",
                recorded_at=recorded_at,
            )
        )


def _assert_tradeable(product, owner_id, side):
    if product.is_deleted or str(product.seller_id) != str(owner_id):
        raise ObjectNotFoundError(f"{side} not found or not owned by the trading seller")
    if not product.available_for_trade:
        raise ValidationError({side: [f"{product.name} is not available for trade"]})


def _assert_quantity(product, quantity, field_name):
    if quantity is None or quantity < 1:
        raise ValidationError({field_name: ["Quantity must be at least 1"]})
    if quantity > product.stock:
        raise ValidationError({field_name: [f"Only {product.stock} units of {product.name} available"]})
