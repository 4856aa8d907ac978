"""ShopStream FastAPI application.

One web server for the Ordering, Payments and Notifications contexts.
Commands are processed synchronously per request. Each request is wrapped
in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → in-process broker, events handled within the request
#   - "production" → outbox + Redis Streams, handlers run in server.py
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from notifications.domain import notifications
from ordering.domain import ordering
from payments.domain import payments
from shared.api.errors import register_error_handlers
from shared.config import get_settings
from shared.logging import add_context, clear_context, configure_logging

ordering.init()
payments.init()
notifications.init()

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/cart": ordering,
    "/orders": ordering,
    "/payments": payments,
    "/notifications": notifications,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()
    logger.info("ShopStream API started", env=settings.env)
    yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ShopStream API",
    description="E-commerce platform — Ordering, Payments & Notifications domains",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match — pass through (health check, docs, etc.)
    return await call_next(request)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a request id (and the caller, when known) to every log line."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    clear_context()
    add_context(request_id=request_id, path=request.url.path)
    user_id = request.headers.get("x-user-id")
    if user_id:
        add_context(user_id=user_id)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from notifications.api.routes import notification_router  # noqa: E402
from ordering.api.routes import cart_router, order_router  # noqa: E402
from payments.api.routes import payment_router  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(notification_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    settings = get_settings()
    return JSONResponse(
        content={
            "status": "ok",
            "env": settings.env,
            "domains": {
                "ordering": {"name": ordering.name},
                "payments": {"name": payments.name},
                "notifications": {"name": notifications.name},
            },
        }
    )
