"""Domain events for the Investment aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from crowdfunding.domain import crowdfunding


@crowdfunding.event(part_of="Investment")
class InvestmentPlaced:
    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_owner_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    placed_at = DateTime(required=True)


@crowdfunding.event(part_of="Investment")
class InvestmentApproved:
    """The campaign owner confirmed the payment arrived."""

    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    receipt_number = String()
    approved_at = DateTime(required=True)


@crowdfunding.event(part_of="Investment")
class InvestmentRejected:
    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    reason = String()
    rejected_at = DateTime(required=True)


@crowdfunding.event(part_of="Investment")
class InvestmentAccepted:
    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    amount = Float(required=True)
    accepted_at = DateTime(required=True)


@crowdfunding.event(part_of="Investment")
class InvestmentCompleted:
    """The investment was counted towards the campaign's funding."""

    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    completed_at = DateTime(required=True)
