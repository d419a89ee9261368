"""Domain events for the User aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from accounts.domain import accounts


@accounts.event(part_of="User")
class UserRegistered:
    """A new account was created with the buyer role."""

    __version__ = 1

    user_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@accounts.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    name = String(required=True)
    phone = String()
    updated_at = DateTime(required=True)


@accounts.event(part_of="User")
class RoleApplicationSubmitted:
    """The user asked to be upgraded to seller or investor."""

    __version__ = 1

    user_id = Identifier(required=True)
    current_role = String(required=True)
    requested_role = String(required=True)
    submitted_at = DateTime(required=True)


@accounts.event(part_of="User")
class RoleApplicationRejected:
    __version__ = 1

    user_id = Identifier(required=True)
    requested_role = String(required=True)
    reviewed_by = Identifier(required=True)
    notes = String()
    rejected_at = DateTime(required=True)


@accounts.event(part_of="User")
class RoleChanged:
    """The user's role changed, through an approved application or a revocation."""

    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    new_role = String(required=True)
    changed_by = Identifier(required=True)
    reason = String()
    changed_at = DateTime(required=True)


@accounts.event(part_of="User")
class UserSuspended:
    __version__ = 1

    user_id = Identifier(required=True)
    reason = String(required=True)
    suspended_at = DateTime(required=True)


@accounts.event(part_of="User")
class UserReactivated:
    __version__ = 1

    user_id = Identifier(required=True)
    reactivated_at = DateTime(required=True)


@accounts.event(part_of="User")
class InvestmentStatsUpdated:
    """An investor's running totals changed after a Crowdfunding event."""

    __version__ = 1

    user_id = Identifier(required=True)
    total_invested = Float(required=True)
    investment_count = Integer(required=True)
    completed_investment_count = Integer(required=True)
    updated_at = DateTime(required=True)
