"""Campaign management — create, update, verify, complete and cancel."""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign
from crowdfunding.domain import crowdfunding

logger = structlog.get_logger(__name__)


@crowdfunding.command(part_of="Campaign")
class CreateCampaign:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True)
    funding_goal = Float(required=True)
    minimum_investment = Float(default=0.0)
    expected_return = Float(default=0.0)
    duration_months = Integer(default=12)
    location = String(max_length=200)
    thumbnail = String(max_length=1000)
    videos = Text()  # JSON list of URLs
    documents = Text()  # JSON list of URLs


@crowdfunding.command(part_of="Campaign")
class UpdateCampaign:
    campaign_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(max_length=200)
    description = Text()
    category = String()
    funding_goal = Float()
    minimum_investment = Float()
    expected_return = Float()
    duration_months = Integer()
    location = String(max_length=200)
    thumbnail = String(max_length=1000)
    videos = Text()
    documents = Text()


@crowdfunding.command(part_of="Campaign")
class VerifyCampaign:
    campaign_id = Identifier(required=True)


@crowdfunding.command(part_of="Campaign")
class CompleteCampaign:
    campaign_id = Identifier(required=True)
    seller_id = Identifier(required=True)


@crowdfunding.command(part_of="Campaign")
class CancelCampaign:
    campaign_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    reason = String(max_length=500)


def _urls(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@crowdfunding.command_handler(part_of=Campaign)
class CampaignManagementHandler:
    @handle(CreateCampaign)
    def create_campaign(self, command):
        campaign = Campaign.launch(
            seller_id=command.seller_id,
            title=command.title,
            description=command.description,
            category=command.category,
            funding_goal=command.funding_goal,
            minimum_investment=command.minimum_investment,
            expected_return=command.expected_return,
            duration_months=command.duration_months,
            location=command.location,
            thumbnail=command.thumbnail,
            videos=_urls(command.videos),
            documents=_urls(command.documents),
        )
        current_domain.repository_for(Campaign).add(campaign)
        logger.info("Campaign created", campaign_id=str(campaign.id), seller_id=str(command.seller_id))
        return str(campaign.id)

    @handle(UpdateCampaign)
    def update_campaign(self, command):
        repo = current_domain.repository_for(Campaign)
        campaign = repo.get(command.campaign_id)
        campaign.assert_owned_by(command.seller_id)
        campaign.update_details(
            title=command.title,
            description=command.description,
            category=command.category,
            funding_goal=command.funding_goal,
            minimum_investment=command.minimum_investment,
            expected_return=command.expected_return,
            duration_months=command.duration_months,
            location=command.location,
            thumbnail=command.thumbnail,
            videos=_urls(command.videos),
            documents=_urls(command.documents),
        )
        repo.add(campaign)

    @handle(VerifyCampaign)
    def verify_campaign(self, command):
        repo = current_domain.repository_for(Campaign)
        campaign = repo.get(command.campaign_id)
        campaign.verify()
        repo.add(campaign)

    @handle(CompleteCampaign)
    def complete_campaign(self, command):
        repo = current_domain.repository_for(Campaign)
        campaign = repo.get(command.campaign_id)
        campaign.assert_owned_by(command.seller_id)
        campaign.complete()
        repo.add(campaign)

    @handle(CancelCampaign)
    def cancel_campaign(self, command):
        repo = current_domain.repository_for(Campaign)
        campaign = repo.get(command.campaign_id)
        campaign.assert_owned_by(command.seller_id)
        campaign.cancel(reason=command.reason)
        repo.add(campaign)
        logger.info("Campaign cancelled", campaign_id=str(campaign.id))
