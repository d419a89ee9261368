"""Inbound cross-domain event handler — Notifications reacts to Trade events.

The counterparty of each step hears about it: the receiving seller for
proposals, updates and cancellations, the initiating seller for accept and
reject, and whichever seller did not complete the exchange for completion.
"""

from notifications.domain import notifications
from notifications.notification.helpers import notify
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.marketplace import (
    TradeAccepted,
    TradeCancelled,
    TradeCompleted,
    TradeInitiated,
    TradeRejected,
    TradeUpdated,
)

notifications.register_external_event(TradeInitiated, "Marketplace.TradeInitiated.v1")
notifications.register_external_event(TradeUpdated, "Marketplace.TradeUpdated.v1")
notifications.register_external_event(TradeAccepted, "Marketplace.TradeAccepted.v1")
notifications.register_external_event(TradeRejected, "Marketplace.TradeRejected.v1")
notifications.register_external_event(TradeCancelled, "Marketplace.TradeCancelled.v1")
notifications.register_external_event(TradeCompleted, "Marketplace.TradeCompleted.v1")


def _trade_update(recipient_id, event, action, status, reason=None):
    context = {"trade_id": str(event.trade_id), "status": status, "action": action}
    if reason:
        context["reason"] = reason
    notify(
        recipient_id,
        NotificationType.TRADE_UPDATE.value,
        context,
        source_event_type=f"Marketplace.{event.__class__.__name__}.v1",
    )


@notifications.event_handler(part_of=Notification, stream_category="marketplace::trade")
class TradeEventsHandler:
    @handle(TradeInitiated)
    def on_trade_initiated(self, event: TradeInitiated) -> None:
        _trade_update(event.seller_to, event, "proposed", "Pending")

    @handle(TradeUpdated)
    def on_trade_updated(self, event: TradeUpdated) -> None:
        _trade_update(event.seller_to, event, "updated", "Pending")

    @handle(TradeAccepted)
    def on_trade_accepted(self, event: TradeAccepted) -> None:
        _trade_update(event.seller_from, event, "accepted", "Accepted")

    @handle(TradeRejected)
    def on_trade_rejected(self, event: TradeRejected) -> None:
        _trade_update(event.seller_from, event, "rejected", "Rejected", event.reason)

    @handle(TradeCancelled)
    def on_trade_cancelled(self, event: TradeCancelled) -> None:
        _trade_update(event.seller_to, event, "cancelled", "Cancelled", event.reason)

    @handle(TradeCompleted)
    def on_trade_completed(self, event: TradeCompleted) -> None:
        counterparty = event.seller_to if str(event.completed_by) == str(event.seller_from) else event.seller_from
        _trade_update(counterparty, event, "completed", "Completed")
