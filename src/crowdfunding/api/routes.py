"""FastAPI routes for the Crowdfunding domain — campaigns, their Q&A and investments."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from crowdfunding.api.schemas import (
    AcceptInvestmentRequest,
    AskQuestionRequest,
    CampaignInvestmentsResponse,
    CampaignListResponse,
    CampaignResponse,
    CancelCampaignRequest,
    ConfirmPaymentRequest,
    CreateCampaignRequest,
    IdResponse,
    InvestmentHistoryQuery,
    InvestmentHistoryResponse,
    InvestmentResponse,
    PlaceInvestmentRequest,
    QuestionListResponse,
    QuestionResponse,
    RejectInvestmentRequest,
    ReplyRequest,
    ReplyResponse,
    StatusResponse,
    SupporterResponse,
    SupportersResponse,
    UpdateCampaignRequest,
)
from crowdfunding.campaign.management import (
    CancelCampaign,
    CompleteCampaign,
    CreateCampaign,
    UpdateCampaign,
    VerifyCampaign,
)
from crowdfunding.campaign.queries import active_campaigns, campaign_detail, seller_campaigns
from crowdfunding.investment.placement import PlaceInvestment
from crowdfunding.investment.queries import campaign_investments, investment_history, recent_supporters
from crowdfunding.investment.review import AcceptInvestment, ConfirmInvestmentPayment, RejectInvestment
from crowdfunding.question.discussion import AskQuestion, DeleteQuestion, ReplyToQuestion
from crowdfunding.question.queries import campaign_questions
from shared.access import Actor, Role, current_actor, require_role

_seller = require_role(Role.SELLER)
_investor = require_role(Role.INVESTOR)
_admin = require_role(Role.ADMIN)


def _ts(value):
    return str(value) if value else None


def _campaign_response(campaign) -> CampaignResponse:
    return CampaignResponse(
        campaign_id=str(campaign.id),
        seller_id=str(campaign.seller_id),
        title=campaign.title,
        description=campaign.description,
        category=campaign.category,
        status=campaign.status,
        funding_goal=campaign.funding_goal,
        minimum_investment=campaign.minimum_investment or 0.0,
        current_amount=campaign.current_amount or 0.0,
        expected_return=campaign.expected_return or 0.0,
        duration_months=campaign.duration_months,
        start_date=_ts(campaign.start_date),
        end_date=_ts(campaign.end_date),
        days_left=campaign.days_left(),
        verified=campaign.verified,
        location=campaign.location,
        thumbnail=campaign.thumbnail,
        videos=campaign.video_urls,
        documents=campaign.document_urls,
        investors_count=campaign.investors_count or 0,
        completed_investments_count=campaign.completed_investments_count or 0,
        completed_investments_amount=campaign.completed_investments_amount or 0.0,
        progress_percentage=campaign.progress_percentage or 0.0,
    )


def _investment_response(investment) -> InvestmentResponse:
    return InvestmentResponse(
        investment_id=str(investment.id),
        investor_id=str(investment.investor_id),
        campaign_id=str(investment.campaign_id),
        amount=investment.amount,
        status=investment.status,
        payment_method=investment.payment_method,
        is_paid=investment.is_paid,
        receipt_number=investment.receipt_number,
        expected_return=investment.expected_return or 0.0,
        rejection_reason=investment.rejection_reason,
        invested_at=_ts(investment.invested_at),
        completed_at=_ts(investment.completed_at),
    )


def _question_response(question) -> QuestionResponse:
    return QuestionResponse(
        question_id=str(question.id),
        campaign_id=str(question.campaign_id),
        asked_by=str(question.asked_by),
        text=question.text,
        replies=[
            ReplyResponse(replied_by=str(r.replied_by), text=r.text, replied_at=_ts(r.replied_at))
            for r in question.ordered_replies()
        ],
        created_at=_ts(question.created_at),
    )


# ---------------------------------------------------------------------------
# Campaign Router
# ---------------------------------------------------------------------------
campaign_router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@campaign_router.post("", status_code=201, response_model=IdResponse)
async def create_campaign(body: CreateCampaignRequest, actor: Actor = Depends(_seller)) -> IdResponse:
    command = CreateCampaign(
        seller_id=actor.user_id,
        title=body.title,
        description=body.description,
        category=body.category,
        funding_goal=body.funding_goal,
        minimum_investment=body.minimum_investment,
        expected_return=body.expected_return,
        duration_months=body.duration_months,
        location=body.location,
        thumbnail=body.thumbnail,
        videos=json.dumps(body.videos),
        documents=json.dumps(body.documents),
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@campaign_router.get("", response_model=CampaignListResponse)
async def list_campaigns(category: str | None = None) -> CampaignListResponse:
    return CampaignListResponse(campaigns=[_campaign_response(c) for c in active_campaigns(category)])


@campaign_router.get("/mine", response_model=CampaignListResponse)
async def my_campaigns(actor: Actor = Depends(_seller)) -> CampaignListResponse:
    return CampaignListResponse(campaigns=[_campaign_response(c) for c in seller_campaigns(actor.user_id)])


@campaign_router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(campaign_id: str) -> CampaignResponse:
    return _campaign_response(campaign_detail(campaign_id))


@campaign_router.put("/{campaign_id}", response_model=StatusResponse)
async def update_campaign(
    campaign_id: str, body: UpdateCampaignRequest, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = UpdateCampaign(
        campaign_id=campaign_id,
        seller_id=actor.user_id,
        title=body.title,
        description=body.description,
        category=body.category,
        funding_goal=body.funding_goal,
        minimum_investment=body.minimum_investment,
        expected_return=body.expected_return,
        duration_months=body.duration_months,
        location=body.location,
        thumbnail=body.thumbnail,
        videos=json.dumps(body.videos) if body.videos is not None else None,
        documents=json.dumps(body.documents) if body.documents is not None else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@campaign_router.put("/{campaign_id}/verify", response_model=StatusResponse)
async def verify_campaign(campaign_id: str, actor: Actor = Depends(_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(VerifyCampaign(campaign_id=campaign_id), asynchronous=False)
    return StatusResponse()


@campaign_router.put("/{campaign_id}/complete", response_model=StatusResponse)
async def complete_campaign(campaign_id: str, actor: Actor = Depends(_seller)) -> StatusResponse:
    command = CompleteCampaign(campaign_id=campaign_id, seller_id=actor.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@campaign_router.put("/{campaign_id}/cancel", response_model=StatusResponse)
async def cancel_campaign(
    campaign_id: str, body: CancelCampaignRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = CancelCampaign(campaign_id=campaign_id, seller_id=actor.user_id, reason=body.reason if body else None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@campaign_router.get("/{campaign_id}/investments", response_model=CampaignInvestmentsResponse)
async def list_campaign_investments(campaign_id: str, actor: Actor = Depends(_seller)) -> CampaignInvestmentsResponse:
    groups = campaign_investments(campaign_id, actor.user_id)
    return CampaignInvestmentsResponse(
        **{status: [_investment_response(i) for i in items] for status, items in groups.items()}
    )


@campaign_router.get("/{campaign_id}/supporters", response_model=SupportersResponse)
async def list_recent_supporters(campaign_id: str) -> SupportersResponse:
    return SupportersResponse(
        supporters=[
            SupporterResponse(
                investor_id=str(i.investor_id),
                amount=i.amount,
                status=i.status,
                invested_at=_ts(i.invested_at),
            )
            for i in recent_supporters(campaign_id)
        ]
    )


@campaign_router.get("/{campaign_id}/questions", response_model=QuestionListResponse)
async def list_questions(campaign_id: str) -> QuestionListResponse:
    return QuestionListResponse(questions=[_question_response(q) for q in campaign_questions(campaign_id)])


@campaign_router.post("/{campaign_id}/questions", status_code=201, response_model=IdResponse)
async def ask_question(
    campaign_id: str, body: AskQuestionRequest, actor: Actor = Depends(current_actor)
) -> IdResponse:
    command = AskQuestion(campaign_id=campaign_id, asked_by=actor.user_id, text=body.text)
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@campaign_router.post("/questions/{question_id}/replies", status_code=201, response_model=StatusResponse)
async def reply_to_question(question_id: str, body: ReplyRequest, actor: Actor = Depends(_seller)) -> StatusResponse:
    command = ReplyToQuestion(question_id=question_id, replied_by=actor.user_id, text=body.text)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@campaign_router.delete("/questions/{question_id}", response_model=StatusResponse)
async def delete_question(question_id: str, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(DeleteQuestion(question_id=question_id, deleted_by=actor.user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Investment Router
# ---------------------------------------------------------------------------
investment_router = APIRouter(prefix="/investments", tags=["investments"])


@investment_router.post("", status_code=201, response_model=IdResponse)
async def place_investment(body: PlaceInvestmentRequest, actor: Actor = Depends(_investor)) -> IdResponse:
    command = PlaceInvestment(
        investor_id=actor.user_id,
        campaign_id=body.campaign_id,
        amount=body.amount,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@investment_router.get("", response_model=InvestmentHistoryResponse)
async def my_investments(
    query: InvestmentHistoryQuery = Depends(), actor: Actor = Depends(_investor)
) -> InvestmentHistoryResponse:
    history = investment_history(
        actor.user_id,
        status=query.status,
        date_from=query.date_from,
        date_to=query.date_to,
        page=query.page,
        limit=query.limit,
    )
    return InvestmentHistoryResponse(
        investments=[_investment_response(i) for i in history["investments"]],
        total=history["total"],
        page=history["page"],
        pages=history["pages"],
        total_amount=history["total_amount"],
    )


@investment_router.put("/{investment_id}/confirm-payment", response_model=StatusResponse)
async def confirm_investment_payment(
    investment_id: str, body: ConfirmPaymentRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = ConfirmInvestmentPayment(
        investment_id=investment_id,
        seller_id=actor.user_id,
        notes=body.notes if body else None,
        receipt_number=body.receipt_number if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@investment_router.put("/{investment_id}/reject", response_model=StatusResponse)
async def reject_investment(
    investment_id: str, body: RejectInvestmentRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = RejectInvestment(
        investment_id=investment_id,
        seller_id=actor.user_id,
        reason=body.reason if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@investment_router.put("/{investment_id}/accept", response_model=StatusResponse)
async def accept_investment(
    investment_id: str, body: AcceptInvestmentRequest | None = None, actor: Actor = Depends(_seller)
) -> StatusResponse:
    command = AcceptInvestment(
        investment_id=investment_id,
        seller_id=actor.user_id,
        notes=body.notes if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
