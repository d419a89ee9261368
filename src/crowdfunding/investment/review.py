"""Investment review by the campaign owner — confirm payment, reject, accept."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from crowdfunding.campaign.campaign import Campaign
from crowdfunding.domain import crowdfunding
from crowdfunding.investment.investment import Investment

logger = structlog.get_logger(__name__)


@crowdfunding.command(part_of="Investment")
class ConfirmInvestmentPayment:
    investment_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    notes = String(max_length=500)
    receipt_number = String(max_length=50)


@crowdfunding.command(part_of="Investment")
class RejectInvestment:
    investment_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    reason = String(max_length=500)


@crowdfunding.command(part_of="Investment")
class AcceptInvestment:
    investment_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    notes = String(max_length=500)


def _load(investment_id):
    investment = current_domain.repository_for(Investment).get(investment_id)
    campaign = current_domain.repository_for(Campaign).get(investment.campaign_id)
    return investment, campaign


@crowdfunding.command_handler(part_of=Investment)
class InvestmentReviewHandler:
    @handle(ConfirmInvestmentPayment)
    def confirm_payment(self, command):
        investment, campaign = _load(command.investment_id)
        investment.confirm_payment(
            campaign,
            command.seller_id,
            notes=command.notes,
            receipt_number=command.receipt_number,
        )
        current_domain.repository_for(Investment).add(investment)

    @handle(RejectInvestment)
    def reject_investment(self, command):
        investment, campaign = _load(command.investment_id)
        investment.reject(campaign, command.seller_id, reason=command.reason)
        current_domain.repository_for(Investment).add(investment)

    @handle(AcceptInvestment)
    def accept_investment(self, command):
        investment, campaign = _load(command.investment_id)
        investment.accept(campaign, command.seller_id, notes=command.notes)

        current_domain.repository_for(Investment).add(investment)
        current_domain.repository_for(Campaign).add(campaign)
        logger.info(
            "Investment accepted",
            investment_id=str(investment.id),
            campaign_id=str(campaign.id),
            current_amount=campaign.current_amount,
            progress_percentage=campaign.progress_percentage,
        )
