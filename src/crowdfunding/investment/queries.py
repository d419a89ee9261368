"""Read-side helpers for investments."""

import math
from datetime import UTC

from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign
from crowdfunding.investment.investment import SUPPORTER_STATUSES, Investment, InvestmentStatus

RECENT_SUPPORTERS_LIMIT = 5


def _investments(**filters):
    return current_domain.repository_for(Investment)._dao.query.filter(**filters).limit(None).all().items


def _aware(value):
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _newest_first(investments):
    return sorted(investments, key=lambda i: _aware(i.invested_at), reverse=True)


def investment_history(investor_id, status=None, date_from=None, date_to=None, page=1, limit=10):
    """An investor's investments, newest first, filtered and paginated.

    Returns a dict with ``investments``, ``total``, ``page``, ``pages`` and
    ``total_amount`` (the sum over every filtered investment, not just the page).
    """
    filters = {"investor_id": str(investor_id)}
    if status:
        filters["status"] = status
    investments = _investments(**filters)
    if date_from:
        investments = [i for i in investments if _aware(i.invested_at) >= _aware(date_from)]
    if date_to:
        investments = [i for i in investments if _aware(i.invested_at) <= _aware(date_to)]
    investments = _newest_first(investments)

    page = max(1, page)
    limit = max(1, limit)
    start = (page - 1) * limit
    return {
        "investments": investments[start : start + limit],
        "total": len(investments),
        "page": page,
        "pages": math.ceil(len(investments) / limit) if investments else 0,
        "total_amount": round(sum(i.amount for i in investments), 2),
    }


def campaign_investments(campaign_id, seller_id):
    """A campaign's investments grouped for its owner."""
    campaign = current_domain.repository_for(Campaign).get(campaign_id)
    campaign.assert_owned_by(seller_id)

    groups = {"completed": [], "rejected": [], "pending": []}
    for investment in _newest_first(_investments(campaign_id=str(campaign.id))):
        if investment.status in (InvestmentStatus.ACCEPTED.value, InvestmentStatus.COMPLETED.value):
            groups["completed"].append(investment)
        elif investment.status == InvestmentStatus.REJECTED.value:
            groups["rejected"].append(investment)
        else:
            groups["pending"].append(investment)
    return groups


def recent_supporters(campaign_id):
    current_domain.repository_for(Campaign).get(campaign_id)
    supporters = [i for i in _investments(campaign_id=str(campaign_id)) if i.status in SUPPORTER_STATUSES]
    return _newest_first(supporters)[:RECENT_SUPPORTERS_LIMIT]
