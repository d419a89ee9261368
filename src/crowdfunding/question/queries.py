"""Read-side helpers for campaign questions."""

from datetime import UTC

from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign
from crowdfunding.question.question import CampaignQuestion


def _aware(value):
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def campaign_questions(campaign_id):
    """Visible questions on a campaign, newest first."""
    current_domain.repository_for(Campaign).get(campaign_id)
    questions = (
        current_domain.repository_for(CampaignQuestion)
        ._dao.query.filter(campaign_id=str(campaign_id), is_deleted=False)
        .limit(None)
        .all()
        .items
    )
    return sorted(questions, key=lambda q: _aware(q.created_at), reverse=True)
