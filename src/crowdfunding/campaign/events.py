"""Domain events for the Campaign aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from crowdfunding.domain import crowdfunding


@crowdfunding.event(part_of="Campaign")
class CampaignCreated:
    __version__ = 1

    campaign_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(required=True)
    category = String(required=True)
    funding_goal = Float(required=True)
    end_date = DateTime(required=True)
    created_at = DateTime(required=True)


@crowdfunding.event(part_of="Campaign")
class CampaignUpdated:
    __version__ = 1

    campaign_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON list of field names
    updated_at = DateTime(required=True)


@crowdfunding.event(part_of="Campaign")
class CampaignVerified:
    __version__ = 1

    campaign_id = Identifier(required=True)
    verified_at = DateTime(required=True)


@crowdfunding.event(part_of="Campaign")
class CampaignFundingRecorded:
    """An accepted investment was counted towards the campaign's goal."""

    __version__ = 1

    campaign_id = Identifier(required=True)
    investment_id = Identifier(required=True)
    amount = Float(required=True)
    current_amount = Float(required=True)
    progress_percentage = Float(required=True)
    completed_investments_count = Integer(required=True)
    recorded_at = DateTime(required=True)


@crowdfunding.event(part_of="Campaign")
class CampaignCompleted:
    __version__ = 1

    campaign_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    current_amount = Float(required=True)
    completed_at = DateTime(required=True)


@crowdfunding.event(part_of="Campaign")
class CampaignCancelled:
    __version__ = 1

    campaign_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    reason = String(max_length=500)
    cancelled_at = DateTime(required=True)
