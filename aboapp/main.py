"""
AboApp Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn aboapp.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌──────────────┐ ┌──────────────┐ ┌──────────────┐  │
    │  │  Request ID  │→│   Logging    │→│ GZip / CORS  │  │
    │  └──────────────┘ └──────────────┘ └──────────────┘  │
    │                                                      │
    │  Routes:                                             │
    │  ┌────────────┐ ┌──────────────────┐ ┌────────────┐  │
    │  │ /api/auth  │ │ /api/subscriptions│ │ /health    │  │
    │  │            │ │ /api/costs        │ │            │  │
    │  │            │ │ /api/reminder-run │ │            │  │
    │  └────────────┘ └──────────────────┘ └────────────┘  │
    │                                                      │
    │  Exception Handlers:                                 │
    │  ┌────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ NotFound→404       │  │
    │  │ AuthProvider→400/502 │ Store→500               │  │
    │  └────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, then the collaborator credential check
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from aboapp import __version__
from aboapp.config import settings
from aboapp.database import dispose_engine
from aboapp.exceptions import (
    AboAppError,
    AuthenticationError,
    AuthProviderError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from aboapp.middleware.logging import RequestLoggingMiddleware
from aboapp.middleware.request_id import RequestIDMiddleware, request_id_var
from aboapp.routes import auth, health, reminders, subscriptions

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # third-party libraries are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("AboApp Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # keep serving: /health reports the missing collaborators
        logger.error("Configuration error: %s", str(e))

    logger.info("Reminder timezone: %s, %d days ahead", settings.app_timezone, settings.reminder_days_ahead)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("AboApp Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, exc: AboAppError, details: bool = True) -> JSONResponse:
    content = {
        "error": error,
        "message": exc.message,
        "request_id": request_id_var.get(""),
    }
    if details and exc.context:
        content["details"] = exc.context
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the common error body.

    Handler hierarchy:
        ValidationError      → 400 Bad Request
        AuthenticationError  → 401 Unauthorized
        NotFoundError        → 404 Not Found
        AuthProviderError    → 400 (provider said no) / 502 (unreachable)
        StoreError           → 500, raw store message
        SQLAlchemyError      → 500, raw store message (commit failures)
        AboAppError (base)   → 500
        Exception (fallback) → 500, generic message
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        response = _error_response(401, "not_authenticated", exc, details=False)
        response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc, details=False)

    @app.exception_handler(AuthProviderError)
    async def handle_auth_provider_error(request: Request, exc: AuthProviderError):
        rid = request_id_var.get("")
        if exc.status_code is not None and exc.status_code < 500:
            logger.warning("[%s] Auth provider rejected request: %s", rid, exc.message)
            return _error_response(400, "auth_error", exc)
        logger.error("[%s] Auth provider failure: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(502, "auth_provider_unavailable", exc)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error("[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "store_error", exc, details=False)

    @app.exception_handler(SQLAlchemyError)
    async def handle_sqlalchemy_error(request: Request, exc: SQLAlchemyError):
        raw = str(getattr(exc, "orig", None) or exc)
        logger.error("[%s] Unwrapped store error: %s", request_id_var.get(""), raw)
        return _error_response(500, "store_error", StoreError(message=raw), details=False)

    @app.exception_handler(AboAppError)
    async def handle_app_error(request: Request, exc: AboAppError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", exc, details=False)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers, and routers."""
    app = FastAPI(
        title="AboApp API",
        description=(
            "Personal subscription tracker: email code sign-in, subscription "
            "listing, monthly cost overview, and renewal reminder emails."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(subscriptions.router)
    app.include_router(reminders.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
