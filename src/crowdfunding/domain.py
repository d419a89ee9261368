"""Crowdfunding bounded context — campaigns and the investments that fund them.

Campaign and Investment share this domain so that accepting an investment
and crediting its campaign commit in one Unit of Work.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="crowdfunding")

logger = get_logger(__name__)

crowdfunding = Domain(name="crowdfunding")
