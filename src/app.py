"""Zentro FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Each request runs inside the consulting domain context with its request id
bound into the structlog context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in domain.toml (e.g. "production").
from consulting.domain import consulting  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

consulting.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Zentro API",
    description="Consulting marketplace: categories, consultants and bookings",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the consulting domain context and request logging context."""
    from consulting.utils.logging import bind_request_context, clear_request_context

    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        with consulting.domain_context():
            response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-Id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from consulting.api import (  # noqa: E402
    admin_router,
    booking_router,
    category_router,
    consultant_router,
    service_router,
)
from consulting.api.errors import register_exception_handlers  # noqa: E402

app.include_router(category_router)
app.include_router(consultant_router)
app.include_router(booking_router)
app.include_router(admin_router)
app.include_router(service_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "success": True,
            "message": "Zentro API is running",
            "data": {"status": "ok", "domain": consulting.name},
        }
    )
