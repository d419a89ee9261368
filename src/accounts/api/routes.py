"""FastAPI routes for the Accounts domain."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from accounts.api.schemas import (
    ApplyForRoleRequest,
    IdResponse,
    ReasonRequest,
    RegisterUserRequest,
    ReviewApplicationRequest,
    RoleApplicationResponse,
    StatusResponse,
    UpdateProfileRequest,
    UserListResponse,
    UserResponse,
)
from accounts.user.account import ReactivateUser, SuspendUser
from accounts.user.profile import UpdateProfile
from accounts.user.queries import pending_role_applications, user_detail
from accounts.user.registration import RegisterUser
from accounts.user.roles import ApplyForRole, ApproveRoleApplication, RejectRoleApplication, RevokeRole
from shared.access import AccessDenied, Actor, Role, current_actor, require_role

router = APIRouter(prefix="/users", tags=["users"])

_admin = require_role(Role.ADMIN)


def _ts(value):
    return str(value) if value else None


def _user_response(user) -> UserResponse:
    application = None
    if user.role_application:
        application = RoleApplicationResponse(
            requested_role=user.role_application.requested_role,
            status=user.role_application.status,
            submitted_at=_ts(user.role_application.submitted_at),
            reviewed_at=_ts(user.role_application.reviewed_at),
            reviewed_by=user.role_application.reviewed_by,
            notes=user.role_application.notes,
        )
    return UserResponse(
        user_id=str(user.id),
        name=user.name,
        email=user.email.address,
        phone=user.phone,
        role=user.role,
        status=user.status,
        role_application=application,
        total_invested=user.total_invested or 0.0,
        investment_count=user.investment_count or 0,
        completed_investment_count=user.completed_investment_count or 0,
        registered_at=_ts(user.registered_at),
    )


@router.post("", status_code=201, response_model=IdResponse)
async def register_user(body: RegisterUserRequest) -> IdResponse:
    command = RegisterUser(name=body.name, email=body.email, phone=body.phone)
    user_id = current_domain.process(command, asynchronous=False)
    return IdResponse(id=user_id)


@router.get("/me", response_model=UserResponse)
async def get_me(actor: Actor = Depends(current_actor)) -> UserResponse:
    return _user_response(user_detail(actor.user_id))


@router.put("/me", response_model=StatusResponse)
async def update_me(body: UpdateProfileRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(UpdateProfile(user_id=actor.user_id, name=body.name, phone=body.phone), asynchronous=False)
    return StatusResponse()


@router.post("/me/role-application", status_code=201, response_model=StatusResponse)
async def apply_for_role(body: ApplyForRoleRequest, actor: Actor = Depends(current_actor)) -> StatusResponse:
    details = body.seller_details if body.requested_role == Role.SELLER.value else body.investor_details
    command = ApplyForRole(
        user_id=actor.user_id,
        requested_role=body.requested_role,
        details=json.dumps(details.model_dump(exclude_none=True)) if details else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.get("/role-applications", response_model=UserListResponse)
async def list_role_applications(actor: Actor = Depends(_admin)) -> UserListResponse:  # noqa: ARG001
    return UserListResponse(users=[_user_response(u) for u in pending_role_applications()])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, actor: Actor = Depends(current_actor)) -> UserResponse:
    if not actor.is_admin and actor.user_id != user_id:
        raise AccessDenied("Only admins can view other users")
    return _user_response(user_detail(user_id))


@router.put("/{user_id}/role-application/approve", response_model=StatusResponse)
async def approve_role_application(
    user_id: str, body: ReviewApplicationRequest | None = None, actor: Actor = Depends(_admin)
) -> StatusResponse:
    command = ApproveRoleApplication(user_id=user_id, reviewer_id=actor.user_id, notes=body.notes if body else None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/{user_id}/role-application/reject", response_model=StatusResponse)
async def reject_role_application(
    user_id: str, body: ReasonRequest, actor: Actor = Depends(_admin)
) -> StatusResponse:
    command = RejectRoleApplication(user_id=user_id, reviewer_id=actor.user_id, notes=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/{user_id}/revoke-role", response_model=StatusResponse)
async def revoke_role(user_id: str, body: ReasonRequest, actor: Actor = Depends(_admin)) -> StatusResponse:
    command = RevokeRole(user_id=user_id, reviewer_id=actor.user_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/{user_id}/suspend", response_model=StatusResponse)
async def suspend_user(
    user_id: str, body: ReasonRequest, actor: Actor = Depends(_admin)  # noqa: ARG001
) -> StatusResponse:
    current_domain.process(SuspendUser(user_id=user_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


@router.put("/{user_id}/reactivate", response_model=StatusResponse)
async def reactivate_user(user_id: str, actor: Actor = Depends(_admin)) -> StatusResponse:  # noqa: ARG001
    current_domain.process(ReactivateUser(user_id=user_id), asynchronous=False)
    return StatusResponse()
