"""User read-side helpers."""

from protean.utils.globals import current_domain

from accounts.user.user import ApplicationStatus, User


def user_detail(user_id):
    return current_domain.repository_for(User).get(user_id)


def pending_role_applications():
    """Users waiting for an admin decision, oldest application first."""
    users = current_domain.repository_for(User)._dao.query.limit(None).all().items
    pending = [u for u in users if u.role_application and u.role_application.status == ApplicationStatus.PENDING.value]
    return sorted(pending, key=lambda u: u.role_application.submitted_at)
