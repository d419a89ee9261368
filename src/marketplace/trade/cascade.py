"""Force-cancel trades whose products leave the market."""

import structlog
from protean.utils.globals import current_domain

from marketplace.trade.trade import Trade

logger = structlog.get_logger(__name__)


def cancel_trades_referencing(product_id, statuses, reason, cancelled_by):
    """Cancel every trade in ``statuses`` that offers or requests ``product_id``.

    Runs inside the caller's Unit of Work, so the product change and the
    cancellations commit together. Returns the cancelled trade ids.
    """
    repo = current_domain.repository_for(Trade)
    trades = {}
    for side in ("product_from_id", "product_to_id"):
        for trade in repo._dao.query.filter(**{side: str(product_id)}).limit(None).all().items:
            if trade.status in statuses:
                trades[str(trade.id)] = trade

    for trade in trades.values():
        trade.force_cancel(reason=reason, cancelled_by=cancelled_by)
        repo.add(trade)

    if trades:
        logger.info(
            "Cancelled trades referencing product",
            product_id=str(product_id),
            trade_ids=sorted(trades),
            reason=reason,
        )
    return sorted(trades)
