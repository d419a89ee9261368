"""Role applications and revocations — commands and handler.

Users apply for an upgrade themselves; admins approve, reject and revoke.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from accounts.domain import accounts
from accounts.user.user import User

logger = structlog.get_logger(__name__)


@accounts.command(part_of="User")
class ApplyForRole:
    user_id = Identifier(required=True)
    requested_role = String(required=True, max_length=20)
    details = Text()  # JSON seller or investor profile


@accounts.command(part_of="User")
class ApproveRoleApplication:
    user_id = Identifier(required=True)
    reviewer_id = Identifier(required=True)
    notes = String(max_length=500)


@accounts.command(part_of="User")
class RejectRoleApplication:
    user_id = Identifier(required=True)
    reviewer_id = Identifier(required=True)
    notes = String(required=True, max_length=500)


@accounts.command(part_of="User")
class RevokeRole:
    user_id = Identifier(required=True)
    reviewer_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@accounts.command_handler(part_of=User)
class RoleManagementHandler:
    @handle(ApplyForRole)
    def apply_for_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        details = json.loads(command.details) if command.details else {}
        user.apply_for_role(command.requested_role, details)
        repo.add(user)
        logger.info("Role application submitted", user_id=str(user.id), requested_role=command.requested_role)

    @handle(ApproveRoleApplication)
    def approve_application(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.approve_application(command.reviewer_id, notes=command.notes)
        repo.add(user)
        logger.info("Role application approved", user_id=str(user.id), role=user.role)

    @handle(RejectRoleApplication)
    def reject_application(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.reject_application(command.reviewer_id, notes=command.notes)
        repo.add(user)

    @handle(RevokeRole)
    def revoke_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.revoke_role(command.reviewer_id, reason=command.reason)
        repo.add(user)
        logger.info("Role revoked", user_id=str(user.id))
