"""Accounts bounded context — users, their single role and role applications.

A user registers as a buyer and may apply to become a seller or an investor.
Admins review applications and can revoke a role back to buyer. Investor
statistics are kept in step with Crowdfunding events.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="accounts")

logger = get_logger(__name__)

accounts = Domain(name="accounts")
