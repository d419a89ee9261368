"""Investment aggregate — an investor's pledge to a campaign.

State Machine:
    PENDING → APPROVED | REJECTED
    APPROVED → ACCEPTED | REJECTED
    ACCEPTED → COMPLETED

Payment is cash on delivery: the campaign owner confirms the money arrived
(approve), then accepts the investment, which completes it and counts it
towards the campaign in the same step. Accepting a pending investment
approves it on the way.
"""

import random
import time
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text, ValueObject

from crowdfunding.domain import crowdfunding
from crowdfunding.investment.events import (
    InvestmentAccepted,
    InvestmentApproved,
    InvestmentCompleted,
    InvestmentPlaced,
    InvestmentRejected,
)

AUTO_CONFIRM_NOTE = "Auto-confirmed during acceptance"


class InvestmentStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    REJECTED = "rejected"


_VALID_TRANSITIONS = {
    InvestmentStatus.PENDING: {InvestmentStatus.APPROVED, InvestmentStatus.REJECTED},
    InvestmentStatus.APPROVED: {InvestmentStatus.ACCEPTED, InvestmentStatus.REJECTED},
    InvestmentStatus.ACCEPTED: {InvestmentStatus.COMPLETED},
    InvestmentStatus.COMPLETED: set(),
    InvestmentStatus.REJECTED: set(),
}

# Statuses shown as a campaign's supporters
SUPPORTER_STATUSES = (
    InvestmentStatus.APPROVED.value,
    InvestmentStatus.ACCEPTED.value,
    InvestmentStatus.COMPLETED.value,
)


def generate_receipt_number():
    return f"INV-{int(time.time() * 1000)}-{random.randint(0, 999)}"


def assert_positive_amount(amount):
    if amount is None or amount <= 0:
        raise ValidationError({"amount": ["Investment amount must be greater than zero"]})


@crowdfunding.value_object(part_of="Investment")
class PaymentDetails:
    receipt_number = String(max_length=50)
    confirmed_by = Identifier()
    confirmation_date = DateTime()
    notes = String(max_length=500)


@crowdfunding.aggregate
class Investment:
    investor_id = Identifier(required=True)
    campaign_id = Identifier(required=True)
    amount = Float(required=True)
    status = String(choices=InvestmentStatus, default=InvestmentStatus.PENDING.value)
    payment_method = String(max_length=50, default="COD")
    is_paid = Boolean(default=False)
    payment_confirmed_at = DateTime()
    payment_details = ValueObject(PaymentDetails)
    receipt_number = String(max_length=50)
    notes = Text()
    expected_return = Float(default=0.0)
    expected_return_percentage = Float(default=0.0)
    rejected_at = DateTime()
    rejected_by = Identifier()
    rejection_reason = String(max_length=500)
    seller_accepted_at = DateTime()
    completed_at = DateTime()
    completion_notes = String(max_length=500)
    counted_in_funding = Boolean(default=False)
    invested_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place(cls, investor_id, campaign, amount, payment_method="COD", notes=None):
        assert_positive_amount(amount)
        campaign.assert_accepts(amount)

        now = datetime.now(UTC)
        percentage = campaign.expected_return or 0.0
        investment = cls(
            investor_id=investor_id,
            campaign_id=str(campaign.id),
            amount=amount,
            payment_method=payment_method or "COD",
            notes=notes,
            expected_return_percentage=percentage,
            expected_return=round(amount * percentage / 100, 2),
            status=InvestmentStatus.PENDING.value,
            invested_at=now,
            updated_at=now,
        )
        investment.raise_(
            InvestmentPlaced(
                investment_id=str(investment.id),
                investor_id=str(investor_id),
                campaign_id=str(campaign.id),
                campaign_owner_id=str(campaign.seller_id),
                campaign_title=campaign.title,
                amount=amount,
                placed_at=now,
            )
        )
        return investment

    def _assert_can_transition(self, target_status):
        current = InvestmentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_campaign(self, campaign):
        if str(campaign.id) != str(self.campaign_id):
            raise ValidationError({"campaign_id": ["Investment does not belong to this campaign"]})

    # -------------------------------------------------------------------
    # Review by the campaign owner
    # -------------------------------------------------------------------
    def confirm_payment(self, campaign, seller_id, notes=None, receipt_number=None):
        """Record that the owner received the money."""
        self._assert_campaign(campaign)
        campaign.assert_owned_by(seller_id)
        self._approve(campaign, seller_id, notes, receipt_number)

    def _approve(self, campaign, seller_id, notes, receipt_number=None):
        self._assert_can_transition(InvestmentStatus.APPROVED)
        now = datetime.now(UTC)
        receipt = receipt_number or generate_receipt_number()
        self.status = InvestmentStatus.APPROVED.value
        self.is_paid = True
        self.payment_confirmed_at = now
        self.receipt_number = receipt
        self.payment_details = PaymentDetails(
            receipt_number=receipt,
            confirmed_by=seller_id,
            confirmation_date=now,
            notes=notes,
        )
        self.updated_at = now
        self.raise_(
            InvestmentApproved(
                investment_id=str(self.id),
                investor_id=str(self.investor_id),
                campaign_id=str(self.campaign_id),
                campaign_title=campaign.title,
                amount=self.amount,
                receipt_number=receipt,
                approved_at=now,
            )
        )

    def reject(self, campaign, seller_id, reason=None):
        self._assert_campaign(campaign)
        campaign.assert_owned_by(seller_id)
        self._assert_can_transition(InvestmentStatus.REJECTED)

        now = datetime.now(UTC)
        self.status = InvestmentStatus.REJECTED.value
        self.rejected_at = now
        self.rejected_by = seller_id
        self.rejection_reason = reason
        self.updated_at = now
        self.raise_(
            InvestmentRejected(
                investment_id=str(self.id),
                investor_id=str(self.investor_id),
                campaign_id=str(self.campaign_id),
                campaign_title=campaign.title,
                amount=self.amount,
                reason=reason,
                rejected_at=now,
            )
        )

    def accept(self, campaign, seller_id, notes=None):
        """Accept and complete the investment, crediting ``campaign``.

        The caller persists both aggregates in the same Unit of Work.
        """
        self._assert_campaign(campaign)
        campaign.assert_owned_by(seller_id)
        if self.status not in (InvestmentStatus.PENDING.value, InvestmentStatus.APPROVED.value):
            raise ValidationError({"status": [f"Cannot accept an investment that is {self.status}"]})

        if self.status == InvestmentStatus.PENDING.value:
            self._approve(campaign, seller_id, AUTO_CONFIRM_NOTE)

        self._assert_can_transition(InvestmentStatus.ACCEPTED)
        now = datetime.now(UTC)
        self.status = InvestmentStatus.ACCEPTED.value
        self.seller_accepted_at = now
        self.raise_(
            InvestmentAccepted(
                investment_id=str(self.id),
                investor_id=str(self.investor_id),
                campaign_id=str(self.campaign_id),
                amount=self.amount,
                accepted_at=now,
            )
        )

        self._assert_can_transition(InvestmentStatus.COMPLETED)
        self.status = InvestmentStatus.COMPLETED.value
        self.completed_at = now
        self.completion_notes = notes
        if not self.counted_in_funding:
            campaign.record_funding(self.id, self.amount)
            self.counted_in_funding = True
        self.updated_at = now
        self.raise_(
            InvestmentCompleted(
                investment_id=str(self.id),
                investor_id=str(self.investor_id),
                campaign_id=str(self.campaign_id),
                campaign_title=campaign.title,
                amount=self.amount,
                completed_at=now,
            )
        )
