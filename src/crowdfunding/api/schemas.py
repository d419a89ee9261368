"""Pydantic request/response schemas for the Crowdfunding API."""

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------
class CreateCampaignRequest(BaseModel):
    title: str
    description: str
    category: str
    funding_goal: float = Field(gt=0)
    minimum_investment: float = Field(default=0.0, ge=0)
    expected_return: float = Field(default=0.0, ge=0)
    duration_months: int = Field(default=12, ge=1)
    location: str | None = None
    thumbnail: str | None = None
    videos: list[str] = []
    documents: list[str] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Hydroponic lettuce expansion",
                    "description": "Two new greenhouse bays for year-round lettuce",
                    "category": "Agri-tech",
                    "funding_goal": 250000,
                    "minimum_investment": 5000,
                    "expected_return": 12,
                    "duration_months": 18,
                    "location": "Benguet",
                }
            ]
        }
    }


class UpdateCampaignRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    funding_goal: float | None = Field(default=None, gt=0)
    minimum_investment: float | None = Field(default=None, ge=0)
    expected_return: float | None = Field(default=None, ge=0)
    duration_months: int | None = Field(default=None, ge=1)
    location: str | None = None
    thumbnail: str | None = None
    videos: list[str] | None = None
    documents: list[str] | None = None


class CancelCampaignRequest(BaseModel):
    reason: str | None = None


class CampaignResponse(BaseModel):
    campaign_id: str
    seller_id: str
    title: str
    description: str
    category: str
    status: str
    funding_goal: float
    minimum_investment: float
    current_amount: float
    expected_return: float
    duration_months: int
    start_date: str | None = None
    end_date: str | None = None
    days_left: int
    verified: bool
    location: str | None = None
    thumbnail: str | None = None
    videos: list[str] = []
    documents: list[str] = []
    investors_count: int
    completed_investments_count: int
    completed_investments_amount: float
    progress_percentage: float


class CampaignListResponse(BaseModel):
    campaigns: list[CampaignResponse]


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------
class PlaceInvestmentRequest(BaseModel):
    campaign_id: str
    amount: float
    payment_method: str = "COD"
    notes: str | None = None


class ConfirmPaymentRequest(BaseModel):
    notes: str | None = None
    receipt_number: str | None = None


class RejectInvestmentRequest(BaseModel):
    reason: str | None = None


class AcceptInvestmentRequest(BaseModel):
    notes: str | None = None


class InvestmentResponse(BaseModel):
    investment_id: str
    investor_id: str
    campaign_id: str
    amount: float
    status: str
    payment_method: str
    is_paid: bool
    receipt_number: str | None = None
    expected_return: float
    rejection_reason: str | None = None
    invested_at: str | None = None
    completed_at: str | None = None


class InvestmentHistoryQuery(BaseModel):
    status: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class InvestmentHistoryResponse(BaseModel):
    investments: list[InvestmentResponse]
    total: int
    page: int
    pages: int
    total_amount: float


class CampaignInvestmentsResponse(BaseModel):
    completed: list[InvestmentResponse]
    rejected: list[InvestmentResponse]
    pending: list[InvestmentResponse]


class SupporterResponse(BaseModel):
    investor_id: str
    amount: float
    status: str
    invested_at: str | None = None


class SupportersResponse(BaseModel):
    supporters: list[SupporterResponse]


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------
class AskQuestionRequest(BaseModel):
    text: str


class ReplyRequest(BaseModel):
    text: str


class ReplyResponse(BaseModel):
    replied_by: str
    text: str
    replied_at: str | None = None


class QuestionResponse(BaseModel):
    question_id: str
    campaign_id: str
    asked_by: str
    text: str
    replies: list[ReplyResponse]
    created_at: str | None = None


class QuestionListResponse(BaseModel):
    questions: list[QuestionResponse]
