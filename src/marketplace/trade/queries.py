"""Read-side helpers for trades, used by the API routes."""

from protean.utils.globals import current_domain

from marketplace.trade.trade import Trade, TradeStatus


def _trades(**filters):
    return current_domain.repository_for(Trade)._dao.query.filter(**filters).limit(None).all().items


def seller_trades(seller_id, direction=None, status=None):
    """Trades a seller sent, received, or both (``direction`` of ``sent`` / ``received``), newest first."""
    trades = []
    if direction in (None, "sent"):
        trades.extend(_trades(seller_from=str(seller_id)))
    if direction in (None, "received"):
        trades.extend(_trades(seller_to=str(seller_id)))
    if status:
        trades = [t for t in trades if t.status == status]
    return sorted(trades, key=lambda t: t.created_at, reverse=True)


def trade_detail(trade_id, actor_id):
    trade = current_domain.repository_for(Trade).get(trade_id)
    trade.assert_party(actor_id)
    return trade


def completed_trades(seller_id):
    """Completed trades split by what the seller gave away and what they received."""
    completed = TradeStatus.COMPLETED.value
    return {
        "given": seller_trades(seller_id, direction="sent", status=completed),
        "received": seller_trades(seller_id, direction="received", status=completed),
    }
