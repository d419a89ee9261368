"""Seller order view — one row per (order, seller), for the seller's order inbox.

A seller sees only their own share of an order: their item count, how many
of those still await a decision, and their slice of the amount.
"""

import json

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

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
)
from marketplace.order.order import Order


def view_id(order_id, seller_id):
    return f"{order_id}-{seller_id}"


@marketplace.projection
class SellerOrderView:
    view_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    order_status = String(required=True)
    item_count = Integer(default=0)
    pending_item_count = Integer(default=0)
    seller_amount = Float(default=0.0)
    placed_at = DateTime()
    updated_at = DateTime()


@marketplace.projector(projector_for=SellerOrderView, aggregates=[Order])
class SellerOrderViewProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        shares = {}
        for item in json.loads(event.items):
            share = shares.setdefault(str(item["seller_id"]), {"count": 0, "amount": 0.0})
            share["count"] += 1
            share["amount"] += item["price"] * item["quantity"]

        repo = current_domain.repository_for(SellerOrderView)
        for seller_id, share in shares.items():
            repo.add(
                SellerOrderView(
                    view_id=view_id(event.order_id, seller_id),
                    order_id=event.order_id,
                    seller_id=seller_id,
                    buyer_id=event.buyer_id,
                    order_status="Pending Confirmation",
                    item_count=share["count"],
                    pending_item_count=share["count"],
                    seller_amount=round(share["amount"], 2),
                    placed_at=event.placed_at,
                    updated_at=event.placed_at,
                )
            )

    @on(OrderItemsProcessed)
    def on_order_items_processed(self, event):
        decided = len(json.loads(event.confirmed_item_ids or "[]")) + len(json.loads(event.rejected_item_ids or "[]"))
        repo = current_domain.repository_for(SellerOrderView)
        record = repo.get(view_id(event.order_id, event.seller_id))
        record.pending_item_count = max(0, record.pending_item_count - decided)
        record.updated_at = event.processed_at
        repo.add(record)

    def _update_status(self, order_id, status, updated_at):
        repo = current_domain.repository_for(SellerOrderView)
        for record in repo._dao.query.filter(order_id=str(order_id)).limit(None).all().items:
            record.order_status = status
            record.updated_at = updated_at
            repo.add(record)

    @on(OrderConfirmed)
    def on_order_confirmed(self, event):
        self._update_status(event.order_id, "Confirmed", event.confirmed_at)

    @on(OrderRejected)
    def on_order_rejected(self, event):
        self._update_status(event.order_id, "Rejected", event.rejected_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update_status(event.order_id, "Cancelled", event.cancelled_at)

    @on(OrderProcessing)
    def on_order_processing(self, event):
        self._update_status(event.order_id, "Processing", event.started_at)

    @on(OrderShipped)
    def on_order_shipped(self, event):
        self._update_status(event.order_id, "Shipped", event.shipped_at)

    @on(OrderDelivered)
    def on_order_delivered(self, event):
        self._update_status(event.order_id, "Delivered", event.delivered_at)

    @on(OrderRefunded)
    def on_order_refunded(self, event):
        self._update_status(event.order_id, "Refunded", event.refunded_at)


def seller_orders(seller_id, status=None):
    """A seller's order inbox, newest first, optionally limited to one status."""
    filters = {"seller_id": str(seller_id)}
    if status:
        filters["order_status"] = status
    records = current_domain.repository_for(SellerOrderView)._dao.query.filter(**filters).limit(None).all().items
    return sorted(records, key=lambda r: r.placed_at, reverse=True)
