"""Application tests for the Crowdfunding (investments, Q&A) and Logistics event handlers."""

from datetime import UTC, datetime

from notifications.notification.crowdfunding_events import CampaignQuestionEventsHandler, InvestmentEventsHandler
from notifications.notification.logistics_events import ShipmentEventsHandler
from notifications.notification.notification import Notification, NotificationType
from protean import current_domain
from shared.events.crowdfunding import (
    InvestmentApproved,
    InvestmentCompleted,
    InvestmentPlaced,
    InvestmentRejected,
    QuestionAnswered,
    QuestionAsked,
)
from shared.events.logistics import CourierAssigned, ShipmentStatusChanged

INVESTMENT = {
    "investment_id": "inv-001",
    "investor_id": "investor-001",
    "campaign_id": "camp-001",
    "campaign_title": "Goat dairy",
    "amount": 500.0,
}


def _for(recipient_id, notification_type):
    return (
        current_domain.repository_for(Notification)
        ._dao.query.filter(recipient_id=recipient_id, notification_type=notification_type)
        .all()
        .items
    )


class TestInvestmentEventsHandler:
    def test_owner_hears_about_new_pledge(self):
        InvestmentEventsHandler().on_investment_placed(
            InvestmentPlaced(**INVESTMENT, campaign_owner_id="seller-001", placed_at=datetime.now(UTC))
        )
        [notification] = _for("seller-001", NotificationType.INVESTMENT_UPDATE.value)
        assert notification.message == "A new investment of ₱500.0 was placed in Goat dairy."
        assert notification.payload["investor_id"] == "investor-001"

    def test_investor_gets_payment_confirmation(self):
        InvestmentEventsHandler().on_investment_approved(
            InvestmentApproved(**INVESTMENT, receipt_number="INV-1-1", approved_at=datetime.now(UTC))
        )
        [notification] = _for("investor-001", NotificationType.PAYMENT_CONFIRMATION.value)
        assert "INV-1-1" in notification.message

    def test_investor_hears_rejection_reason(self):
        InvestmentEventsHandler().on_investment_rejected(
            InvestmentRejected(**INVESTMENT, reason="Bounced", rejected_at=datetime.now(UTC))
        )
        [notification] = _for("investor-001", NotificationType.INVESTMENT_UPDATE.value)
        assert notification.message.endswith("Reason: Bounced")

    def test_investor_hears_completion(self):
        InvestmentEventsHandler().on_investment_completed(
            InvestmentCompleted(**INVESTMENT, completed_at=datetime.now(UTC))
        )
        [notification] = _for("investor-001", NotificationType.INVESTMENT_UPDATE.value)
        assert notification.payload["status"] == "completed"


QUESTION = {
    "question_id": "q-001",
    "campaign_id": "camp-001",
    "campaign_title": "Goat dairy",
}


class TestCampaignQuestionEventsHandler:
    def test_owner_hears_about_new_question(self):
        CampaignQuestionEventsHandler().on_question_asked(
            QuestionAsked(
                **QUESTION,
                campaign_owner_id="seller-001",
                asked_by="investor-001",
                text="How many goats?",
                asked_at=datetime.now(UTC),
            )
        )
        [notification] = _for("seller-001", NotificationType.NEW_QUESTION.value)
        assert notification.message == 'New question on Goat dairy: "How many goats?"'
        assert notification.payload["asked_by"] == "investor-001"

    def test_owner_is_not_told_about_own_question(self):
        CampaignQuestionEventsHandler().on_question_asked(
            QuestionAsked(
                **QUESTION,
                campaign_owner_id="seller-002",
                asked_by="seller-002",
                text="Pinned FAQ",
                asked_at=datetime.now(UTC),
            )
        )
        assert _for("seller-002", NotificationType.NEW_QUESTION.value) == []

    def test_asker_hears_about_reply(self):
        CampaignQuestionEventsHandler().on_question_answered(
            QuestionAnswered(
                **QUESTION,
                asked_by="investor-001",
                replied_by="seller-001",
                text="Twenty",
                replied_at=datetime.now(UTC),
            )
        )
        [notification] = _for("investor-001", NotificationType.NEW_REPLY.value)
        assert notification.title == "New Reply"
        assert notification.payload["question_id"] == "q-001"


class TestShipmentEventsHandler:
    def test_courier_assignment(self):
        ShipmentEventsHandler().on_courier_assigned(
            CourierAssigned(
                shipment_id="ship-001",
                order_id="ord-001",
                buyer_id="buyer-001",
                courier_id="courier-001",
                courier_name="FarmExpress",
                tracking_number="AGF123456789",
                assigned_at=datetime.now(UTC),
            )
        )
        [notification] = _for("buyer-001", NotificationType.SHIPPING_ASSIGNED.value)
        assert "FarmExpress" in notification.message
        assert notification.refers_to_order("ord-001")

    def test_status_change(self):
        ShipmentEventsHandler().on_shipment_status_changed(
            ShipmentStatusChanged(
                shipment_id="ship-001",
                order_id="ord-001",
                buyer_id="buyer-001",
                tracking_number="AGF123456789",
                previous_status="Picked Up",
                new_status="In Transit",
                location="Manila hub",
                changed_at=datetime.now(UTC),
            )
        )
        [notification] = _for("buyer-001", NotificationType.SHIPPING_UPDATE.value)
        assert notification.payload["status"] == "In Transit"
        assert "Manila hub" in notification.message
