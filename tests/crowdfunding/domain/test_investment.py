"""Domain tests for the Investment aggregate and its review by the campaign owner."""

import re

import pytest
from crowdfunding.campaign.campaign import Campaign
from crowdfunding.investment.events import (
    InvestmentAccepted,
    InvestmentApproved,
    InvestmentCompleted,
    InvestmentPlaced,
    InvestmentRejected,
)
from crowdfunding.investment.investment import (
    AUTO_CONFIRM_NOTE,
    Investment,
    InvestmentStatus,
    generate_receipt_number,
)
from protean.exceptions import ValidationError
from shared.access import AccessDenied


@pytest.fixture()
def campaign():
    return Campaign.launch(
        seller_id="seller-001",
        title="Tilapia ponds",
        description="Three new ponds",
        category="Aquaculture",
        funding_goal=1000.0,
        minimum_investment=100.0,
        expected_return=10.0,
    )


@pytest.fixture()
def investment(campaign):
    return Investment.place(investor_id="investor-001", campaign=campaign, amount=200.0)


class TestPlacement:
    def test_starts_pending_and_unpaid(self, investment):
        assert investment.status == InvestmentStatus.PENDING.value
        assert investment.is_paid is False
        assert investment.payment_method == "COD"

    def test_expected_return_from_campaign(self, investment):
        assert investment.expected_return_percentage == 10.0
        assert investment.expected_return == 20.0

    def test_raises_placed_event_for_owner(self, investment):
        event = investment._events[-1]
        assert isinstance(event, InvestmentPlaced)
        assert event.campaign_owner_id == "seller-001"
        assert event.campaign_title == "Tilapia ponds"

    def test_amount_must_be_positive(self, campaign):
        with pytest.raises(ValidationError) as exc:
            Investment.place(investor_id="investor-001", campaign=campaign, amount=0)
        assert "amount" in exc.value.messages

    def test_below_minimum_is_refused(self, campaign):
        with pytest.raises(ValidationError):
            Investment.place(investor_id="investor-001", campaign=campaign, amount=50.0)

    def test_closed_campaign_is_refused(self, campaign):
        campaign.complete()
        with pytest.raises(ValidationError):
            Investment.place(investor_id="investor-001", campaign=campaign, amount=200.0)


class TestReceiptNumber:
    def test_format(self):
        assert re.fullmatch(r"INV-\d+-\d{1,3}", generate_receipt_number())


class TestConfirmPayment:
    def test_approves_and_marks_paid(self, campaign, investment):
        investment.confirm_payment(campaign, "seller-001", notes="Cash received")

        assert investment.status == InvestmentStatus.APPROVED.value
        assert investment.is_paid is True
        assert investment.receipt_number.startswith("INV-")
        assert investment.payment_details.confirmed_by == "seller-001"
        assert investment.payment_details.notes == "Cash received"
        assert isinstance(investment._events[-1], InvestmentApproved)

    def test_keeps_supplied_receipt_number(self, campaign, investment):
        investment.confirm_payment(campaign, "seller-001", receipt_number="OR-123")
        assert investment.receipt_number == "OR-123"

    def test_does_not_credit_campaign(self, campaign, investment):
        investment.confirm_payment(campaign, "seller-001")
        assert campaign.current_amount == 0.0

    def test_only_owner_can_confirm(self, campaign, investment):
        with pytest.raises(AccessDenied):
            investment.confirm_payment(campaign, "seller-002")

    def test_cannot_confirm_twice(self, campaign, investment):
        investment.confirm_payment(campaign, "seller-001")
        with pytest.raises(ValidationError):
            investment.confirm_payment(campaign, "seller-001")

    def test_wrong_campaign_is_refused(self, investment):
        other = Campaign.launch(
            seller_id="seller-001",
            title="Other",
            description="Other",
            category="Livestock",
            funding_goal=500.0,
        )
        with pytest.raises(ValidationError) as exc:
            investment.confirm_payment(other, "seller-001")
        assert "campaign_id" in exc.value.messages


class TestReject:
    def test_reject_pending(self, campaign, investment):
        investment.reject(campaign, "seller-001", reason="Cash never arrived")

        assert investment.status == InvestmentStatus.REJECTED.value
        assert investment.rejected_by == "seller-001"
        assert investment.rejection_reason == "Cash never arrived"
        assert isinstance(investment._events[-1], InvestmentRejected)

    def test_reject_approved(self, campaign, investment):
        investment.confirm_payment(campaign, "seller-001")
        investment.reject(campaign, "seller-001")
        assert investment.status == InvestmentStatus.REJECTED.value

    def test_completed_cannot_be_rejected(self, campaign, investment):
        investment.accept(campaign, "seller-001")
        with pytest.raises(ValidationError):
            investment.reject(campaign, "seller-001")


class TestAccept:
    def test_accept_approved_completes_and_credits(self, campaign, investment):
        investment.confirm_payment(campaign, "seller-001")
        investment.accept(campaign, "seller-001", notes="Welcome aboard")

        assert investment.status == InvestmentStatus.COMPLETED.value
        assert investment.completion_notes == "Welcome aboard"
        assert investment.counted_in_funding is True
        assert campaign.current_amount == 200.0
        assert campaign.progress_percentage == 20.0

    def test_accept_pending_approves_on_the_way(self, campaign, investment):
        investment.accept(campaign, "seller-001")

        assert investment.status == InvestmentStatus.COMPLETED.value
        assert investment.is_paid is True
        assert investment.payment_details.notes == AUTO_CONFIRM_NOTE
        event_types = [type(e) for e in investment._events]
        assert event_types[-3:] == [InvestmentApproved, InvestmentAccepted, InvestmentCompleted]

    def test_rejected_cannot_be_accepted(self, campaign, investment):
        investment.reject(campaign, "seller-001")
        with pytest.raises(ValidationError):
            investment.accept(campaign, "seller-001")

    def test_completed_cannot_be_accepted_again(self, campaign, investment):
        investment.accept(campaign, "seller-001")
        with pytest.raises(ValidationError):
            investment.accept(campaign, "seller-001")
        assert campaign.current_amount == 200.0

    def test_only_owner_can_accept(self, campaign, investment):
        with pytest.raises(AccessDenied):
            investment.accept(campaign, "investor-001")
        assert investment.status == InvestmentStatus.PENDING.value
