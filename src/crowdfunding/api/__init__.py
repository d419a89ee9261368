"""Crowdfunding domain API package."""

from crowdfunding.api.routes import campaign_router, investment_router

__all__ = ["campaign_router", "investment_router"]
