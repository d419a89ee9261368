"""Pydantic request/response schemas for the Accounts API."""

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: str
    phone: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Maria Santos", "email": "maria@example.com", "phone": "+639171234567"}]
        }
    }


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    phone: str | None = None


class SellerDetailsSchema(BaseModel):
    business_name: str
    business_address: str | None = None
    tax_id: str | None = None
    company_type: str | None = None
    farm_location: str | None = None
    contact_number: str | None = None
    supporting_document: str | None = None


class InvestorDetailsSchema(BaseModel):
    investment_focus: str | None = None
    annual_budget: float | None = Field(default=None, ge=0)
    investment_type: str | None = None
    company_name: str | None = None
    contact_number: str | None = None
    supporting_document: str | None = None


class ApplyForRoleRequest(BaseModel):
    requested_role: str = Field(..., pattern="^(seller|investor)$")
    seller_details: SellerDetailsSchema | None = None
    investor_details: InvestorDetailsSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "requested_role": "seller",
                    "seller_details": {"business_name": "Santos Family Farm", "farm_location": "Benguet"},
                }
            ]
        }
    }


class ReviewApplicationRequest(BaseModel):
    notes: str | None = None


class ReasonRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class RoleApplicationResponse(BaseModel):
    requested_role: str
    status: str
    submitted_at: str | None = None
    reviewed_at: str | None = None
    reviewed_by: str | None = None
    notes: str | None = None


class UserResponse(BaseModel):
    user_id: str
    name: str
    email: str
    phone: str | None = None
    role: str
    status: str
    role_application: RoleApplicationResponse | None = None
    total_invested: float = 0.0
    investment_count: int = 0
    completed_investment_count: int = 0
    registered_at: str | None = None


class UserListResponse(BaseModel):
    users: list[UserResponse]
