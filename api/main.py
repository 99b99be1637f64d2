"""
api/main.py -- FastAPI application entry point for the alert service.

Run with:      uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins

Lifespan builds the user store, alert store, and session registry and hangs
them on app.state; shutdown closes the stores. The session registry is
in-memory: a restart logs every client out.

Error contract: every failure is rendered as {"error": <message>, "code":
<code>} with exactly one status per error family (see core/errors.py).
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from alerts.store import AlertStore
from api.models import ErrorResponse, HealthResponse
from api.routes.alerts import router as alerts_router
from api.routes.auth import router as auth_router
from auth.sessions import InMemorySessionRegistry
from auth.store import UserStore
from core.config import get_settings
from core.errors import (
    AlertServiceError,
    AuthError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

_VERSION = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("alertservice.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create stores and the session registry; close stores on shutdown."""
    logger.info("Alert service starting up")
    app.state.user_store = UserStore(_settings.database_url)
    app.state.alert_store = AlertStore(_settings.database_url)
    app.state.sessions = InMemorySessionRegistry()
    logger.info(
        "Stores initialized; sessions are in-memory (max_age=%ss, 0 = none)",
        _settings.session_max_age_seconds,
    )

    yield

    app.state.alert_store.close()
    app.state.user_store.close()
    logger.info("Alert service shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Alert Service API",
    description="User registration, bearer-token login, and per-user alerts.",
    version=_VERSION,
    lifespan=lifespan,
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=_settings.allowed_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(alerts_router, prefix="/api", tags=["Alerts"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# One handler per error family, one status per handler. Messages come from
# the error class, never from the underlying cause.
# ---------------------------------------------------------------------------


def _error(status_code: int, exc: AlertServiceError, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.message, code=exc.code).model_dump(),
        headers=headers,
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, exc)


@app.exception_handler(AuthError)
async def auth_handler(request: Request, exc: AuthError) -> JSONResponse:
    return _error(401, exc, headers={"WWW-Authenticate": "Bearer"})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, exc)


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(409, exc)


@app.exception_handler(UpstreamError)
async def upstream_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Store failure. The cause is logged with its traceback; the client gets a generic 500."""
    logger.error(
        "Upstream failure on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error(500, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing/malformed body fields or path params are a 400, same as ValidationError."""
    fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) or "body" for err in exc.errors()})
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=f"Missing or invalid: {', '.join(fields)}",
            code="validation_error",
        ).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing-level errors (unknown path, wrong method) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail), code=f"http_{exc.status_code}").model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Server error.", code="server_error").model_dump(),
    )


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state. No auth.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version, and whether the durable store answers."""
    db_ok = request.app.state.user_store.ping()
    return HealthResponse(version=_VERSION, database="ok" if db_ok else "error")
