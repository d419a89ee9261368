"""Investment placement — command and handler."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign
from crowdfunding.domain import crowdfunding
from crowdfunding.investment.investment import Investment, assert_positive_amount

logger = structlog.get_logger(__name__)


@crowdfunding.command(part_of="Investment")
class PlaceInvestment:
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    amount = Float(required=True)
    payment_method = String(max_length=50, default="COD")
    notes = Text()


@crowdfunding.command_handler(part_of=Investment)
class PlaceInvestmentHandler:
    @handle(PlaceInvestment)
    def place_investment(self, command):
        assert_positive_amount(command.amount)

        campaign_repo = current_domain.repository_for(Campaign)
        campaign = campaign_repo.get(command.campaign_id)
        investment = Investment.place(
            investor_id=command.investor_id,
            campaign=campaign,
            amount=command.amount,
            payment_method=command.payment_method,
            notes=command.notes,
        )
        campaign.register_investor()

        current_domain.repository_for(Investment).add(investment)
        campaign_repo.add(campaign)
        logger.info(
            "Investment placed",
            investment_id=str(investment.id),
            campaign_id=str(campaign.id),
            amount=command.amount,
        )
        return str(investment.id)
