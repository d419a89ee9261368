"""Refund requests — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.product.stock import release_units


@marketplace.command(part_of="Order")
class RequestRefund:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@marketplace.command(part_of="Order")
class ResolveRefund:
    order_id = Identifier(required=True)
    resolved_by = Identifier(required=True)
    approve = Boolean(required=True)
    note = String(max_length=500)
    is_admin = Boolean(default=False)


@marketplace.command_handler(part_of=Order)
class RefundHandler:
    @handle(RequestRefund)
    def request_refund(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.request_refund(command.buyer_id, command.reason)
        repo.add(order)

    @handle(ResolveRefund)
    def resolve_refund(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        released = order.resolve_refund(
            command.resolved_by,
            approve=command.approve,
            note=command.note,
            is_admin=bool(command.is_admin),
        )
        release_units(released)
        repo.add(order)
