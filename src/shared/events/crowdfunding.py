"""Cross-domain event contracts for Crowdfunding domain events.

Consumed by Accounts (investment statistics on the investor's profile) and
by Notifications (investment updates, campaign questions and replies).
Registered as external events via domain.register_external_event().

The source-of-truth events are in src/crowdfunding/investment/events.py
and src/crowdfunding/question/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String, Text


class InvestmentPlaced(BaseEvent):
    """An investor pledged an amount to a campaign."""

    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_owner_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    placed_at = DateTime(required=True)


class InvestmentApproved(BaseEvent):
    """The campaign owner confirmed receiving the payment."""

    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    receipt_number = String()
    approved_at = DateTime(required=True)


class InvestmentRejected(BaseEvent):
    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    reason = String()
    rejected_at = DateTime(required=True)


class InvestmentCompleted(BaseEvent):
    """The investment was accepted and counted towards the campaign's funding."""

    __version__ = 1

    investment_id = Identifier(required=True)
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    amount = Float(required=True)
    completed_at = DateTime(required=True)


class QuestionAsked(BaseEvent):
    """Someone asked a question on a campaign page."""

    __version__ = 1

    question_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_owner_id = Identifier(required=True)
    campaign_title = String()
    asked_by = Identifier(required=True)
    text = Text(required=True)
    asked_at = DateTime(required=True)


class QuestionAnswered(BaseEvent):
    """The campaign owner replied to a question."""

    __version__ = 1

    question_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    campaign_title = String()
    asked_by = Identifier(required=True)
    replied_by = Identifier(required=True)
    text = Text(required=True)
    replied_at = DateTime(required=True)
