"""User registration — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from accounts.domain import accounts
from accounts.user.user import User

logger = structlog.get_logger(__name__)


@accounts.command(part_of="User")
class RegisterUser:
    """Create a new buyer account."""

    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    phone = String(max_length=30)


def _email_taken(email):
    users = current_domain.repository_for(User)._dao.query.limit(None).all().items
    return any(u.email.address == email for u in users)


@accounts.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        email = command.email.strip().lower()
        if _email_taken(email):
            raise ValidationError({"email": ["A user with this email already exists"]})

        user = User.register(name=command.name, email=email, phone=command.phone)
        current_domain.repository_for(User).add(user)
        logger.info("User registered", user_id=str(user.id))
        return str(user.id)
