"""User aggregate root with SellerProfile, InvestorProfile and RoleApplication value objects.

Every user holds exactly one role. Buyers can apply to become sellers or
investors; an admin approves or rejects the application. Sellers and
investors can be revoked back to buyer. Admin is never granted through an
application.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text, ValueObject
from protean.utils.reflection import declared_fields

from accounts.domain import accounts
from accounts.shared.email import EmailAddress
from accounts.user.events import (
    InvestmentStatsUpdated,
    ProfileUpdated,
    RoleApplicationRejected,
    RoleApplicationSubmitted,
    RoleChanged,
    UserReactivated,
    UserRegistered,
    UserSuspended,
)
from shared.access import Role

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class UserStatus(Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class ApplicationStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_UPGRADES = {
    (Role.BUYER, Role.SELLER),
    (Role.BUYER, Role.INVESTOR),
}
_DOWNGRADES = {
    (Role.SELLER, Role.BUYER),
    (Role.INVESTOR, Role.BUYER),
}


def _as_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError({"role": [f"Unknown role '{value}'"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@accounts.value_object(part_of="User")
class SellerProfile:
    """Business details a buyer submits to become a seller."""

    business_name = String(required=True, max_length=200)
    business_address = String(max_length=500)
    tax_id = String(max_length=50)
    company_type = String(max_length=100)
    farm_location = String(max_length=255)
    contact_number = String(max_length=30)
    supporting_document = String(max_length=1000)  # URL


@accounts.value_object(part_of="User")
class InvestorProfile:
    """Investment intent a buyer submits to become an investor."""

    investment_focus = String(max_length=200)
    annual_budget = Float(min_value=0.0)
    investment_type = String(max_length=100)
    company_name = String(max_length=200)
    contact_number = String(max_length=30)
    supporting_document = String(max_length=1000)  # URL


@accounts.value_object(part_of="User")
class RoleApplication:
    requested_role = String(required=True, max_length=20)
    status = String(choices=ApplicationStatus, default=ApplicationStatus.PENDING.value)
    details = Text()  # JSON of what was submitted
    submitted_at = DateTime()
    reviewed_at = DateTime()
    reviewed_by = String(max_length=50)
    notes = String(max_length=500)

    @property
    def is_pending(self):
        return self.status == ApplicationStatus.PENDING.value


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@accounts.aggregate
class User:
    """A person on AgriMarket, acting as buyer, seller, investor or admin."""

    name = String(required=True, max_length=150)
    email = ValueObject(EmailAddress, required=True)
    phone = String(max_length=30)
    role = String(choices=Role, default=Role.BUYER.value)
    status = String(choices=UserStatus, default=UserStatus.ACTIVE.value)
    seller_profile = ValueObject(SellerProfile)
    investor_profile = ValueObject(InvestorProfile)
    role_application = ValueObject(RoleApplication)

    # Investor statistics, maintained from Crowdfunding events
    total_invested = Float(default=0.0)
    investment_count = Integer(default=0)
    completed_investment_count = Integer(default=0)
    last_investment_at = DateTime()

    registered_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, name, email, phone=None):
        email_vo = EmailAddress(address=email.strip().lower())
        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=email_vo,
            phone=phone,
            role=Role.BUYER.value,
            status=UserStatus.ACTIVE.value,
            registered_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=name,
                email=email_vo.address,
                role=Role.BUYER.value,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(self, name=_UNSET, phone=_UNSET):
        if name is not _UNSET and name:
            self.name = name
        if phone is not _UNSET:
            self.phone = phone

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProfileUpdated(user_id=str(self.id), name=self.name, phone=self.phone, updated_at=self.updated_at)
        )

    # -------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------
    def _assert_active(self):
        if self.status != UserStatus.ACTIVE.value:
            raise ValidationError({"status": ["Account is suspended"]})

    def apply_for_role(self, requested_role, details=None):
        self._assert_active()
        target = _as_role(requested_role)
        current = Role(self.role)
        if (current, target) not in _UPGRADES:
            raise ValidationError({"role": [f"Cannot apply to change role from {current.value} to {target.value}"]})
        if self.role_application and self.role_application.is_pending:
            raise ValidationError({"role_application": ["An application is already pending review"]})

        profile_cls = SellerProfile if target == Role.SELLER else InvestorProfile
        allowed = declared_fields(profile_cls)
        details = {k: v for k, v in (details or {}).items() if k in allowed}
        if target == Role.SELLER:
            self.seller_profile = SellerProfile(**details)
        else:
            self.investor_profile = InvestorProfile(**details)

        now = datetime.now(UTC)
        self.role_application = RoleApplication(
            requested_role=target.value,
            status=ApplicationStatus.PENDING.value,
            details=json.dumps(details),
            submitted_at=now,
        )
        self.updated_at = now
        self.raise_(
            RoleApplicationSubmitted(
                user_id=str(self.id),
                current_role=current.value,
                requested_role=target.value,
                submitted_at=now,
            )
        )

    def _review(self, status, reviewer_id, notes, now):
        application = self.role_application
        self.role_application = RoleApplication(
            requested_role=application.requested_role,
            status=status.value,
            details=application.details,
            submitted_at=application.submitted_at,
            reviewed_at=now,
            reviewed_by=str(reviewer_id),
            notes=notes,
        )
        self.updated_at = now

    def _assert_pending_application(self):
        if not self.role_application or not self.role_application.is_pending:
            raise ValidationError({"role_application": ["No pending application to review"]})

    def approve_application(self, reviewer_id, notes=None):
        self._assert_pending_application()
        now = datetime.now(UTC)
        previous = self.role
        new_role = self.role_application.requested_role
        self._review(ApplicationStatus.APPROVED, reviewer_id, notes, now)
        self.role = new_role
        self.raise_(
            RoleChanged(
                user_id=str(self.id),
                previous_role=previous,
                new_role=new_role,
                changed_by=str(reviewer_id),
                reason=notes,
                changed_at=now,
            )
        )

    def reject_application(self, reviewer_id, notes=None):
        self._assert_pending_application()
        now = datetime.now(UTC)
        requested = self.role_application.requested_role
        self._review(ApplicationStatus.REJECTED, reviewer_id, notes, now)
        self.raise_(
            RoleApplicationRejected(
                user_id=str(self.id),
                requested_role=requested,
                reviewed_by=str(reviewer_id),
                notes=notes,
                rejected_at=now,
            )
        )

    def revoke_role(self, reviewer_id, reason=None):
        current = Role(self.role)
        if (current, Role.BUYER) not in _DOWNGRADES:
            raise ValidationError({"role": [f"Cannot revoke role {current.value}"]})

        now = datetime.now(UTC)
        self.role = Role.BUYER.value
        self.updated_at = now
        self.raise_(
            RoleChanged(
                user_id=str(self.id),
                previous_role=current.value,
                new_role=Role.BUYER.value,
                changed_by=str(reviewer_id),
                reason=reason,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Account status
    # -------------------------------------------------------------------
    def suspend(self, reason):
        if self.status != UserStatus.ACTIVE.value:
            raise ValidationError({"status": ["Only active accounts can be suspended"]})

        now = datetime.now(UTC)
        self.status = UserStatus.SUSPENDED.value
        self.updated_at = now
        self.raise_(UserSuspended(user_id=str(self.id), reason=reason, suspended_at=now))

    def reactivate(self):
        if self.status != UserStatus.SUSPENDED.value:
            raise ValidationError({"status": ["Only suspended accounts can be reactivated"]})

        now = datetime.now(UTC)
        self.status = UserStatus.ACTIVE.value
        self.updated_at = now
        self.raise_(UserReactivated(user_id=str(self.id), reactivated_at=now))

    # -------------------------------------------------------------------
    # Investor statistics
    # -------------------------------------------------------------------
    def _stats_changed(self, now):
        self.updated_at = now
        self.raise_(
            InvestmentStatsUpdated(
                user_id=str(self.id),
                total_invested=self.total_invested,
                investment_count=self.investment_count,
                completed_investment_count=self.completed_investment_count,
                updated_at=now,
            )
        )

    def record_investment_placed(self, placed_at=None):
        now = datetime.now(UTC)
        self.investment_count = (self.investment_count or 0) + 1
        self.last_investment_at = placed_at or now
        self._stats_changed(now)

    def record_investment_completed(self, amount):
        now = datetime.now(UTC)
        self.completed_investment_count = (self.completed_investment_count or 0) + 1
        self.total_invested = round((self.total_invested or 0.0) + amount, 2)
        self._stats_changed(now)
