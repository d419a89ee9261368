"""Campaign aggregate — a seller's funding drive.

A campaign runs for ``duration_months`` from its start date. Investments
only move the funding figures once a seller accepts them: placing one bumps
``investors_count``, accepting one credits ``current_amount`` and the
completed-investment tallies, and recomputes ``progress_percentage``.

State Machine:
    ACTIVE → COMPLETED | CANCELLED
"""

import calendar
import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from crowdfunding.campaign.events import (
    CampaignCancelled,
    CampaignCompleted,
    CampaignCreated,
    CampaignFundingRecorded,
    CampaignUpdated,
    CampaignVerified,
)
from crowdfunding.domain import crowdfunding
from shared.access import AccessDenied


class CampaignCategory(Enum):
    AGRICULTURE = "Agriculture"
    LIVESTOCK = "Livestock"
    AQUACULTURE = "Aquaculture"
    AGRI_TECH = "Agri-tech"
    SUSTAINABLE = "Sustainable"


class CampaignStatus(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    CampaignStatus.ACTIVE: {CampaignStatus.COMPLETED, CampaignStatus.CANCELLED},
    CampaignStatus.COMPLETED: set(),
    CampaignStatus.CANCELLED: set(),
}

_EDITABLE_FIELDS = (
    "title",
    "description",
    "category",
    "funding_goal",
    "minimum_investment",
    "expected_return",
    "duration_months",
    "location",
    "thumbnail",
    "videos",
    "documents",
)


def add_months(start, months):
    """``start`` moved forward by whole calendar months, clamping the day."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def _aware(value):
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@crowdfunding.aggregate
class Campaign:
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, choices=CampaignCategory)
    seller_id = Identifier(required=True)
    funding_goal = Float(required=True)
    minimum_investment = Float(default=0.0, min_value=0.0)
    current_amount = Float(default=0.0)
    expected_return = Float(default=0.0, min_value=0.0)  # percent
    duration_months = Integer(default=12, min_value=1)
    start_date = DateTime()
    end_date = DateTime()
    status = String(choices=CampaignStatus, default=CampaignStatus.ACTIVE.value)
    location = String(max_length=200)
    thumbnail = String(max_length=1000)
    videos = Text()  # JSON list of video URLs
    documents = Text()  # JSON list of document URLs
    verified = Boolean(default=False)
    investors_count = Integer(default=0)
    completed_investments_count = Integer(default=0)
    completed_investments_amount = Float(default=0.0)
    progress_percentage = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def funding_goal_must_be_positive(self):
        if self.funding_goal is None or self.funding_goal <= 0:
            raise ValidationError({"funding_goal": ["Funding goal must be greater than zero"]})

    @invariant.post
    def minimum_cannot_exceed_goal(self):
        if self.minimum_investment and self.funding_goal and self.minimum_investment > self.funding_goal:
            raise ValidationError({"minimum_investment": ["Minimum investment cannot exceed the funding goal"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def launch(
        cls,
        seller_id,
        title,
        description,
        category,
        funding_goal,
        minimum_investment=0.0,
        expected_return=0.0,
        duration_months=12,
        location=None,
        thumbnail=None,
        videos=None,
        documents=None,
        start_date=None,
    ):
        now = datetime.now(UTC)
        start = start_date or now
        campaign = cls(
            seller_id=seller_id,
            title=title,
            description=description,
            category=category,
            funding_goal=funding_goal,
            minimum_investment=minimum_investment or 0.0,
            expected_return=expected_return or 0.0,
            duration_months=duration_months or 12,
            start_date=start,
            end_date=add_months(start, duration_months or 12),
            location=location,
            thumbnail=thumbnail,
            videos=json.dumps(list(videos or [])),
            documents=json.dumps(list(documents or [])),
            status=CampaignStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        campaign.raise_(
            CampaignCreated(
                campaign_id=str(campaign.id),
                seller_id=str(seller_id),
                title=title,
                category=category,
                funding_goal=funding_goal,
                end_date=campaign.end_date,
                created_at=now,
            )
        )
        return campaign

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    def days_left(self, now=None):
        """Whole days until ``end_date``, rounded up and never negative."""
        if not self.end_date:
            return 0
        now = now or datetime.now(UTC)
        remaining = (_aware(self.end_date) - now).total_seconds() / 86400
        return max(0, math.ceil(remaining))

    @property
    def video_urls(self):
        return json.loads(self.videos) if self.videos else []

    @property
    def document_urls(self):
        return json.loads(self.documents) if self.documents else []

    @property
    def is_active(self):
        return self.status == CampaignStatus.ACTIVE.value

    def assert_owned_by(self, seller_id):
        if str(self.seller_id) != str(seller_id):
            raise AccessDenied("Only the campaign owner can do that")

    def _assert_can_transition(self, target_status):
        current = CampaignStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    # -------------------------------------------------------------------
    # Investments
    # -------------------------------------------------------------------
    def assert_accepts(self, amount):
        """Check that ``amount`` may be pledged to this campaign right now."""
        if not self.is_active:
            raise ValidationError({"campaign": [f"Campaign is {self.status} and not accepting investments"]})
        if self.minimum_investment and amount < self.minimum_investment:
            raise ValidationError(
                {"amount": [f"Minimum investment for this campaign is {self.minimum_investment:.2f}"]}
            )

    def register_investor(self):
        self.investors_count = (self.investors_count or 0) + 1
        self.updated_at = datetime.now(UTC)

    def record_funding(self, investment_id, amount):
        """Count an accepted investment towards the goal."""
        now = datetime.now(UTC)
        self.current_amount = round((self.current_amount or 0.0) + amount, 2)
        self.completed_investments_count = (self.completed_investments_count or 0) + 1
        self.completed_investments_amount = round((self.completed_investments_amount or 0.0) + amount, 2)
        self.progress_percentage = round(self.current_amount / self.funding_goal * 100, 2)
        self.updated_at = now
        self.raise_(
            CampaignFundingRecorded(
                campaign_id=str(self.id),
                investment_id=str(investment_id),
                amount=amount,
                current_amount=self.current_amount,
                progress_percentage=self.progress_percentage,
                completed_investments_count=self.completed_investments_count,
                recorded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Management
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        if not self.is_active:
            raise ValidationError({"status": [f"Cannot edit a {self.status} campaign"]})

        applied = []
        for field_name in _EDITABLE_FIELDS:
            value = changes.get(field_name)
            if value is None:
                continue
            if field_name in ("videos", "documents"):
                value = json.dumps(list(value))
            setattr(self, field_name, value)
            applied.append(field_name)

        if not applied:
            return

        if "duration_months" in applied:
            self.end_date = add_months(_aware(self.start_date), self.duration_months)
        if "funding_goal" in applied:
            self.progress_percentage = round((self.current_amount or 0.0) / self.funding_goal * 100, 2)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CampaignUpdated(
                campaign_id=str(self.id),
                changed_fields=json.dumps(applied),
                updated_at=self.updated_at,
            )
        )

    def verify(self):
        if self.verified:
            return
        now = datetime.now(UTC)
        self.verified = True
        self.updated_at = now
        self.raise_(CampaignVerified(campaign_id=str(self.id), verified_at=now))

    def complete(self):
        self._assert_can_transition(CampaignStatus.COMPLETED)
        now = datetime.now(UTC)
        self.status = CampaignStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(
            CampaignCompleted(
                campaign_id=str(self.id),
                seller_id=str(self.seller_id),
                current_amount=self.current_amount or 0.0,
                completed_at=now,
            )
        )

    def cancel(self, reason=None):
        self._assert_can_transition(CampaignStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = CampaignStatus.CANCELLED.value
        self.updated_at = now
        self.raise_(
            CampaignCancelled(
                campaign_id=str(self.id),
                seller_id=str(self.seller_id),
                reason=reason,
                cancelled_at=now,
            )
        )
