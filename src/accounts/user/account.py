"""Account status — suspend and reactivate (admin only)."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from accounts.domain import accounts
from accounts.user.user import User


@accounts.command(part_of="User")
class SuspendUser:
    user_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@accounts.command(part_of="User")
class ReactivateUser:
    user_id = Identifier(required=True)


@accounts.command_handler(part_of=User)
class AccountStatusHandler:
    @handle(SuspendUser)
    def suspend_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.suspend(reason=command.reason)
        repo.add(user)

    @handle(ReactivateUser)
    def reactivate_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.reactivate()
        repo.add(user)
