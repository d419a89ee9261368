"""Application tests for role applications, reviews and revocations."""

import json

import pytest
from accounts.user.account import ReactivateUser, SuspendUser
from accounts.user.profile import UpdateProfile
from accounts.user.queries import pending_role_applications, user_detail
from accounts.user.registration import RegisterUser
from accounts.user.roles import ApplyForRole, ApproveRoleApplication, RejectRoleApplication, RevokeRole
from protean import current_domain
from protean.exceptions import ValidationError


def _register(email):
    return current_domain.process(RegisterUser(name="Grower", email=email), asynchronous=False)


def _apply(user_id, role="seller", details=None):
    details = details if details is not None else {"business_name": "Highland Greens"}
    current_domain.process(
        ApplyForRole(user_id=user_id, requested_role=role, details=json.dumps(details)), asynchronous=False
    )


@pytest.fixture()
def user_id():
    return _register("grower@example.com")


class TestApplications:
    def test_apply_then_approve(self, user_id):
        _apply(user_id)
        current_domain.process(
            ApproveRoleApplication(user_id=user_id, reviewer_id="admin-001", notes="Welcome"), asynchronous=False
        )

        user = user_detail(user_id)
        assert user.role == "seller"
        assert user.seller_profile.business_name == "Highland Greens"
        assert user.role_application.status == "approved"

    def test_apply_then_reject(self, user_id):
        _apply(user_id, role="investor", details={"investment_focus": "Poultry"})
        current_domain.process(
            RejectRoleApplication(user_id=user_id, reviewer_id="admin-001", notes="Incomplete"), asynchronous=False
        )

        user = user_detail(user_id)
        assert user.role == "buyer"
        assert user.role_application.status == "rejected"
        assert user.role_application.notes == "Incomplete"

    def test_seller_application_needs_business_name(self, user_id):
        with pytest.raises(ValidationError):
            current_domain.process(ApplyForRole(user_id=user_id, requested_role="seller"), asynchronous=False)
        assert user_detail(user_id).role_application is None

    def test_revoke(self, user_id):
        _apply(user_id)
        current_domain.process(ApproveRoleApplication(user_id=user_id, reviewer_id="admin-001"), asynchronous=False)
        current_domain.process(
            RevokeRole(user_id=user_id, reviewer_id="admin-001", reason="Policy violation"), asynchronous=False
        )
        assert user_detail(user_id).role == "buyer"

    def test_pending_applications_oldest_first(self, user_id):
        other_id = _register("second@example.com")
        reviewed_id = _register("third@example.com")
        _apply(user_id)
        _apply(other_id, role="investor", details={"investment_focus": "Poultry"})
        _apply(reviewed_id)
        current_domain.process(
            ApproveRoleApplication(user_id=reviewed_id, reviewer_id="admin-001"), asynchronous=False
        )

        assert [str(u.id) for u in pending_role_applications()] == [user_id, other_id]


class TestAccountStatus:
    def test_suspend_and_reactivate(self, user_id):
        current_domain.process(SuspendUser(user_id=user_id, reason="Chargebacks"), asynchronous=False)
        assert user_detail(user_id).status == "suspended"

        with pytest.raises(ValidationError):
            _apply(user_id)

        current_domain.process(ReactivateUser(user_id=user_id), asynchronous=False)
        assert user_detail(user_id).status == "active"


class TestProfile:
    def test_update_only_given_fields(self, user_id):
        current_domain.process(UpdateProfile(user_id=user_id, phone="+639000000000"), asynchronous=False)

        user = user_detail(user_id)
        assert user.name == "Grower"
        assert user.phone == "+639000000000"

    def test_rename(self, user_id):
        current_domain.process(UpdateProfile(user_id=user_id, name="Highland Grower"), asynchronous=False)
        assert user_detail(user_id).name == "Highland Grower"
