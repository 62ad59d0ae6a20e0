"""
Askwell Backend — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       uvicorn serves the module-level `app` (uvicorn askwell.main:app).

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                      FastAPI App                          │
    │                                                           │
    │  Middleware: RateLimit → RequestID → Logging → GZip → CORS│
    │                                                           │
    │  Routers:  /api/questions  /api/votes  /api/tags          │
    │            /api/notifications  /api/users  /api/stats     │
    │            /health                                        │
    │                                                           │
    │  Exception Handlers:                                      │
    │    Validation→400  AuthRequired→401  Unauthorized→403     │
    │    NotFound→404    Conflict→409      RateLimit→429        │
    │    Database→500    anything else→500                      │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, banner
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from askwell import __version__
from askwell.config import settings
from askwell.database import dispose_engine
from askwell.exceptions import (
    AskwellError,
    AuthenticationRequiredError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    RateLimitExceededError,
    UnauthorizedError,
    ValidationError,
)
from askwell.middleware.logging import RequestLoggingMiddleware
from askwell.middleware.rate_limit import RateLimitMiddleware
from askwell.middleware.request_id import RequestIDMiddleware, request_id_var
from askwell.routes import health, notifications, questions, tags, users, votes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] askwell.services.vote_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Askwell Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving so /health can report the problem
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Askwell Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the AskwellError hierarchy onto HTTP responses.

    4xx responses carry the exception's message and context. 5xx responses
    carry a generic message; the details go to the server log only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationRequiredError)
    async def handle_authentication_required(
        request: Request, exc: AuthenticationRequiredError,
    ):
        return _error_response(401, "authentication_required", exc.message)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error_response(403, "unauthorized", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message, exc.context)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s | %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(409, "conflict", exc.message)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return _error_response(
            429,
            "rate_limit_exceeded",
            exc.message,
            exc.context,
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(AskwellError)
    async def handle_application_error(request: Request, exc: AskwellError):
        logger.error(
            "[%s] Unhandled application error %s: %s",
            request_id_var.get(""), type(exc).__name__, exc.message,
        )
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Askwell API",
        description=(
            "Community Q&A: questions, answers, voting, accepted answers, "
            "tags and notifications."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # ── Routers ───────────────────────────────────────────────────────────
    app.include_router(questions.router)
    app.include_router(votes.router)
    app.include_router(tags.router)
    app.include_router(notifications.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
