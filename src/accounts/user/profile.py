"""Profile updates — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from accounts.domain import accounts
from accounts.user.user import User


@accounts.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    name = String(max_length=150)
    phone = String(max_length=30)


@accounts.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        changes = {}
        if command.name is not None:
            changes["name"] = command.name
        if command.phone is not None:
            changes["phone"] = command.phone
        user.update_profile(**changes)
        repo.add(user)
