"""Accounts domain API package."""

from accounts.api.routes import router

__all__ = ["router"]
