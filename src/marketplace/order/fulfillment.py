"""Delivery progress of an order — commands and handler.

These are issued by the shipment reactions (see ``logistics_events``) and by
admins correcting a stuck order.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class MarkOrderProcessing:
    order_id = Identifier(required=True)
    note = String(max_length=500)
    updated_by = Identifier()


@marketplace.command(part_of="Order")
class MarkOrderShipped:
    order_id = Identifier(required=True)
    note = String(max_length=500)
    updated_by = Identifier()


@marketplace.command(part_of="Order")
class MarkOrderDelivered:
    order_id = Identifier(required=True)
    note = String(max_length=500)
    updated_by = Identifier()


@marketplace.command_handler(part_of=Order)
class OrderFulfillmentHandler:
    @handle(MarkOrderProcessing)
    def mark_processing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_processing(note=command.note, updated_by=command.updated_by)
        repo.add(order)

    @handle(MarkOrderShipped)
    def mark_shipped(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_shipped(note=command.note, updated_by=command.updated_by)
        repo.add(order)

    @handle(MarkOrderDelivered)
    def mark_delivered(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_delivered(note=command.note, updated_by=command.updated_by)
        repo.add(order)
