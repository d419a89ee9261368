"""AgriMarket FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - default      → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from accounts.domain import accounts  # noqa: E402
from crowdfunding.domain import crowdfunding  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from logistics.domain import logistics  # noqa: E402
from marketplace.domain import marketplace  # noqa: E402
from notifications.domain import notifications  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers
from shared.access import register_access_handlers
from shared.logging import add_context, clear_context

accounts.init()
marketplace.init()
crowdfunding.init()
logistics.init()
notifications.init()

_DOMAINS = (accounts, marketplace, crowdfunding, logistics, notifications)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/users": accounts,
    "/products": marketplace,
    "/cart": marketplace,
    "/orders": marketplace,
    "/trades": marketplace,
    "/campaigns": crowdfunding,
    "/investments": crowdfunding,
    "/couriers": logistics,
    "/shipments": logistics,
    "/notifications": notifications,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="AgriMarket API",
    description="Agricultural marketplace — accounts, marketplace, crowdfunding, logistics & notifications",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
register_access_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is None:
        # No domain match: health check and docs pass straight through
        return await call_next(request)

    add_context(domain=domain.name, path=request.url.path, user_id=request.headers.get("x-user-id"))
    try:
        with domain.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from accounts.api import router as accounts_router  # noqa: E402
from crowdfunding.api import campaign_router, investment_router  # noqa: E402
from logistics.api import courier_router, shipment_router  # noqa: E402
from marketplace.api import cart_router, order_router, product_router, trade_router  # noqa: E402
from notifications.api import router as notifications_router  # noqa: E402

app.include_router(accounts_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(trade_router)
app.include_router(campaign_router)
app.include_router(investment_router)
app.include_router(courier_router)
app.include_router(shipment_router)
app.include_router(notifications_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {domain.name: {"name": domain.name} for domain in _DOMAINS},
        }
    )
