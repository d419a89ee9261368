"""Inbound cross-domain event handlers — Notifications reacts to Investment and campaign Q&A events."""

from notifications.domain import notifications
from notifications.notification.helpers import notify
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.crowdfunding import (
    InvestmentApproved,
    InvestmentCompleted,
    InvestmentPlaced,
    InvestmentRejected,
    QuestionAnswered,
    QuestionAsked,
)

notifications.register_external_event(InvestmentPlaced, "Crowdfunding.InvestmentPlaced.v1")
notifications.register_external_event(InvestmentApproved, "Crowdfunding.InvestmentApproved.v1")
notifications.register_external_event(InvestmentRejected, "Crowdfunding.InvestmentRejected.v1")
notifications.register_external_event(InvestmentCompleted, "Crowdfunding.InvestmentCompleted.v1")
notifications.register_external_event(QuestionAsked, "Crowdfunding.QuestionAsked.v1")
notifications.register_external_event(QuestionAnswered, "Crowdfunding.QuestionAnswered.v1")


def _context(event, **extra):
    return {
        "investment_id": str(event.investment_id),
        "campaign_id": str(event.campaign_id),
        "campaign_title": event.campaign_title,
        "amount": event.amount,
        **extra,
    }


@notifications.event_handler(part_of=Notification, stream_category="crowdfunding::investment")
class InvestmentEventsHandler:
    """Campaign owners hear about new pledges; investors hear about every decision."""

    @handle(InvestmentPlaced)
    def on_investment_placed(self, event: InvestmentPlaced) -> None:
        notify(
            event.campaign_owner_id,
            NotificationType.INVESTMENT_UPDATE.value,
            _context(event, action="received", status="pending", investor_id=str(event.investor_id)),
            source_event_type="Crowdfunding.InvestmentPlaced.v1",
        )

    @handle(InvestmentApproved)
    def on_investment_approved(self, event: InvestmentApproved) -> None:
        notify(
            event.investor_id,
            NotificationType.PAYMENT_CONFIRMATION.value,
            _context(event, status="approved", receipt_number=event.receipt_number),
            source_event_type="Crowdfunding.InvestmentApproved.v1",
        )

    @handle(InvestmentRejected)
    def on_investment_rejected(self, event: InvestmentRejected) -> None:
        notify(
            event.investor_id,
            NotificationType.INVESTMENT_UPDATE.value,
            _context(event, action="rejected", status="rejected", reason=event.reason),
            source_event_type="Crowdfunding.InvestmentRejected.v1",
        )

    @handle(InvestmentCompleted)
    def on_investment_completed(self, event: InvestmentCompleted) -> None:
        notify(
            event.investor_id,
            NotificationType.INVESTMENT_UPDATE.value,
            _context(event, action="completed", status="completed"),
            source_event_type="Crowdfunding.InvestmentCompleted.v1",
        )


def _question_context(event, **extra):
    return {
        "question_id": str(event.question_id),
        "campaign_id": str(event.campaign_id),
        "campaign_title": event.campaign_title,
        "text": event.text,
        **extra,
    }


@notifications.event_handler(part_of=Notification, stream_category="crowdfunding::campaign_question")
class CampaignQuestionEventsHandler:
    """Owners hear about new questions, askers hear about replies. Nobody is told about their own post."""

    @handle(QuestionAsked)
    def on_question_asked(self, event: QuestionAsked) -> None:
        if str(event.asked_by) == str(event.campaign_owner_id):
            return
        notify(
            event.campaign_owner_id,
            NotificationType.NEW_QUESTION.value,
            _question_context(event, asked_by=str(event.asked_by)),
            source_event_type="Crowdfunding.QuestionAsked.v1",
        )

    @handle(QuestionAnswered)
    def on_question_answered(self, event: QuestionAnswered) -> None:
        if str(event.replied_by) == str(event.asked_by):
            return
        notify(
            event.asked_by,
            NotificationType.NEW_REPLY.value,
            _question_context(event, replied_by=str(event.replied_by)),
            source_event_type="Crowdfunding.QuestionAnswered.v1",
        )
