"""Inbound cross-domain event handler — Accounts reacts to Investment events.

Keeps the investor's running totals on the user record:

- InvestmentPlaced: one more investment
- InvestmentCompleted: one more completed investment, amount added to the
  total invested
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.crowdfunding import InvestmentCompleted, InvestmentPlaced

from accounts.domain import accounts
from accounts.user.user import User

logger = structlog.get_logger(__name__)

accounts.register_external_event(InvestmentPlaced, "Crowdfunding.InvestmentPlaced.v1")
accounts.register_external_event(InvestmentCompleted, "Crowdfunding.InvestmentCompleted.v1")


def _load_investor(investor_id):
    try:
        return current_domain.repository_for(User).get(investor_id)
    except ObjectNotFoundError:
        logger.warning("Investor not found, statistics not updated", investor_id=str(investor_id))
        return None


@accounts.event_handler(part_of=User, stream_category="crowdfunding::investment")
class InvestmentStatsHandler:
    @handle(InvestmentPlaced)
    def on_investment_placed(self, event: InvestmentPlaced) -> None:
        user = _load_investor(event.investor_id)
        if user is None:
            return
        user.record_investment_placed(placed_at=event.placed_at)
        current_domain.repository_for(User).add(user)

    @handle(InvestmentCompleted)
    def on_investment_completed(self, event: InvestmentCompleted) -> None:
        user = _load_investor(event.investor_id)
        if user is None:
            return
        user.record_investment_completed(event.amount)
        current_domain.repository_for(User).add(user)
