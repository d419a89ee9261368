"""Seller decisions on an order — commands and handler.

A seller can settle all their items at once (confirm/reject) or decide item
by item. Stock for rejected items goes back to the products in the same Unit
of Work.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.product.stock import release_units

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    note = String(max_length=500)


@marketplace.command(part_of="Order")
class RejectOrder:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@marketplace.command(part_of="Order")
class ProcessOrderItems:
    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    decisions = Text(required=True)  # JSON: [{"item_id": ..., "action": "confirm"|"reject"}]
    reason = String(max_length=500)


@marketplace.command_handler(part_of=Order)
class SellerActionsHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm_by_seller(command.seller_id, note=command.note)
        repo.add(order)
        logger.info("Seller confirmed order items", order_id=str(order.id), seller_id=str(command.seller_id))

    @handle(RejectOrder)
    def reject_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        released = order.reject_by_seller(command.seller_id, command.reason)
        release_units(released)
        repo.add(order)
        logger.info(
            "Seller rejected order items",
            order_id=str(order.id),
            seller_id=str(command.seller_id),
            restored_lines=len(released),
        )

    @handle(ProcessOrderItems)
    def process_order_items(self, command):
        raw = json.loads(command.decisions) if isinstance(command.decisions, str) else command.decisions
        decisions = {}
        for entry in raw or []:
            item_id = str(entry.get("item_id") or "")
            if not item_id:
                raise ValidationError({"decisions": ["Every decision needs an item_id"]})
            decisions[item_id] = entry.get("action")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        released = order.process_items(command.seller_id, decisions, reason=command.reason)
        release_units(released)
        repo.add(order)
        logger.info(
            "Seller processed order items",
            order_id=str(order.id),
            seller_id=str(command.seller_id),
            decided=len(decisions),
            status=order.status,
        )
