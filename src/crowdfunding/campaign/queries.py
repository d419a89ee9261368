"""Read-side helpers for campaigns."""

from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign, CampaignStatus


def _campaigns(**filters):
    return current_domain.repository_for(Campaign)._dao.query.filter(**filters).limit(None).all().items


def active_campaigns(category=None):
    filters = {"status": CampaignStatus.ACTIVE.value}
    if category:
        filters["category"] = category
    return sorted(_campaigns(**filters), key=lambda c: c.created_at, reverse=True)


def seller_campaigns(seller_id):
    return sorted(_campaigns(seller_id=str(seller_id)), key=lambda c: c.created_at, reverse=True)


def campaign_detail(campaign_id):
    return current_domain.repository_for(Campaign).get(campaign_id)
