"""
HackReg Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn hackreg.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain (outermost first):                    │
    │  ┌──────────┐ ┌──────────┐ ┌────────────┐ ┌──────────┐  │
    │  │  Req ID  │→│ Logging  │→│ Rate Limit │→│   GZip   │  │
    │  └──────────┘ └──────────┘ └────────────┘ └──────────┘  │
    │                                                         │
    │  Routes:                                                │
    │  ┌──────────────────────────┐ ┌───────────────────────┐ │
    │  │ GET/POST                 │ │ GET /registration/    │ │
    │  │ /registration/challenge/ │ │     status/           │ │
    │  └──────────────────────────┘ └───────────────────────┘ │
    │  ┌──────────────────────────┐                           │
    │  │ GET /health              │                           │
    │  └──────────────────────────┘                           │
    │                                                         │
    │  Exception Handlers:                                    │
    │  ┌───────────────────────────────────────────────────┐  │
    │  │ Answer→400 │ Auth→401 │ Closed/Solved→403 │ DB→500 │  │
    │  └───────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, config validation, wait for database
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from hackreg import __version__
from hackreg.config import settings
from hackreg.database import dispose_engine, wait_for_database
from hackreg.exceptions import (
    ChallengeAlreadySolvedError,
    DatabaseError,
    HackRegError,
    IncorrectAnswerError,
    RegistrationClosedError,
    UnauthorizedError,
    ValidationError,
)
from hackreg.middleware.logging import RequestLoggingMiddleware
from hackreg.middleware.rate_limit import RateLimitMiddleware
from hackreg.middleware.request_id import RequestIDMiddleware, request_id_var
from hackreg.routes import challenge, health, registration

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Quiet chatty third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Validate critical configuration (logged, not fatal)
        3. Wait for the database (tenacity; re-raises after the last attempt)

    Shutdown sequence:
        1. Dispose database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("HackReg Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    await wait_for_database()

    logger.info(
        "Registration closes at %s", settings.registration_close_datetime.isoformat()
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("HackReg Backend shutting down...")
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
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler map:
        ValidationError              → 400 validation_error
        IncorrectAnswerError         → 400 incorrect_answer
        UnauthorizedError            → 401 unauthorized
        RegistrationClosedError      → 403 registration_closed
        ChallengeAlreadySolvedError  → 403 challenge_already_solved
        DatabaseError                → 500 server_error
        HackRegError (base)          → 500 server_error
        Exception (fallback)         → 500 internal_server_error

    Responses never carry stack traces, SQL, or challenge solutions.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(IncorrectAnswerError)
    async def handle_incorrect_answer(request: Request, exc: IncorrectAnswerError):
        return _error_response(400, "incorrect_answer", exc.message)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error_response(401, "unauthorized", exc.message)

    @app.exception_handler(RegistrationClosedError)
    async def handle_registration_closed(request: Request, exc: RegistrationClosedError):
        return _error_response(403, "registration_closed", exc.message)

    @app.exception_handler(ChallengeAlreadySolvedError)
    async def handle_already_solved(request: Request, exc: ChallengeAlreadySolvedError):
        return _error_response(403, "challenge_already_solved", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Full context server-side only
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(HackRegError)
    async def handle_app_error(request: Request, exc: HackRegError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
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
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="HackReg API",
        description=(
            "Hackathon registration challenge service. Registrants fetch a "
            "generated alliance puzzle and submit its hidden target sum."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Starlette runs middleware in REVERSE order of addition: the last one
    # added is the outermost. Resulting order per request:
    #   RequestID → Logging → RateLimit → GZip → routes
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(registration.router)
    app.include_router(challenge.router)
    app.include_router(health.router)

    return app


# uvicorn expects `hackreg.main:app` to be importable
app = create_app()
