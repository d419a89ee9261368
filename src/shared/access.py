"""Caller identity and access control for the HTTP layer.

Authentication happens upstream: the gateway verifies the bearer token and
forwards the caller as ``X-User-Id`` / ``X-User-Role`` headers. Routes pull
an :class:`Actor` from those headers, gate on role with :func:`require_role`,
and command handlers raise :class:`AccessDenied` for ownership violations.
"""

from enum import Enum

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"
    INVESTOR = "investor"
    ADMIN = "admin"


class AccessDenied(Exception):
    """The actor is authenticated but not allowed to touch this resource."""


class Actor(BaseModel):
    user_id: str
    role: str = Role.BUYER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


async def current_actor(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=Role.BUYER.value),
) -> Actor:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing caller identity")
    if x_user_role not in {r.value for r in Role}:
        raise HTTPException(status_code=403, detail=f"Unknown role: {x_user_role}")
    return Actor(user_id=x_user_id, role=x_user_role)


def require_role(*roles: Role):
    """Build a dependency that admits only the given roles."""
    allowed = {r.value for r in roles}

    async def _dependency(
        x_user_id: str = Header(default=""),
        x_user_role: str = Header(default=Role.BUYER.value),
    ) -> Actor:
        actor = await current_actor(x_user_id=x_user_id, x_user_role=x_user_role)
        if actor.role not in allowed:
            raise HTTPException(
                status_code=403,
                detail=f"Requires one of roles: {', '.join(sorted(allowed))}",
            )
        return actor

    return _dependency


def register_access_handlers(app: FastAPI) -> None:
    """Map AccessDenied raised anywhere below a route to HTTP 403."""

    @app.exception_handler(AccessDenied)
    async def _access_denied(request: Request, exc: AccessDenied):  # noqa: ARG001
        return JSONResponse(status_code=403, content={"detail": str(exc)})
