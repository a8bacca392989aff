"""
Notely Backend: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   ``create_app(settings)`` returns a configured app; ``app`` at module
       level is what uvicorn imports (``uvicorn notely.main:app``).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐                 │
    │  │ Req ID   │→│ Logging  │→│ CORS │                 │
    │  └──────────┘ └──────────┘ └──────┘                 │
    │                                                     │
    │  Routes:                                            │
    │  GET /   GET /v1/healthz                            │
    │  POST /v1/users                (database only)      │
    │  GET /v1/users, GET|POST /v1/notes                  │
    │                    └── AuthGuard (database only)    │
    │                                                     │
    │  Exception Handlers:                                │
    │  Auth→401 │ Validation→400 │ NotFound→404 │ DB→500  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report configuration problems
    Shutdown: dispose the database engine (if any)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from notely import __version__
from notely.api_config import ApiConfig
from notely.config import Settings, settings as default_settings
from notely.database import create_engine_from_settings, create_session_factory
from notely.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from notely.middleware.auth import AuthGuard
from notely.middleware.logging import RequestLoggingMiddleware
from notely.middleware.request_id import RequestIDMiddleware, request_id_var
from notely.responses import INTERNAL_ERROR_MESSAGE, respond_with_error
from notely.routes import health, index, notes, users
from notely.services.user_service import DatabaseIdentityResolver

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Handler: stdout (container runtimes collect it)
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the application exception hierarchy to ``{"error": ...}`` responses.

    Handler hierarchy:
        AuthenticationError → 401
        ValidationError     → 400
        NotFoundError       → 404
        DatabaseError       → 500 (generic message, context logged)
        Exception           → 500 (generic message, traceback logged)

    Handler exceptions outside this hierarchy are answered inside the
    middleware chain by RequestLoggingMiddleware, so they keep their
    X-Request-ID and access line. The ``Exception`` handler here runs in
    Starlette's ServerErrorMiddleware, outside RequestIDMiddleware, and only
    sees failures raised by the middleware themselves; those 500s carry no
    X-Request-ID.

    Guarded routes never reach the AuthenticationError handler: the guard
    answers those itself. The handler covers code that raises it directly.
    """

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return respond_with_error(401, exc.message)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return respond_with_error(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return respond_with_error(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return respond_with_error(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        return respond_with_error(500, INTERNAL_ERROR_MESSAGE, log_err=exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_api_config(settings: Settings) -> ApiConfig:
    """Create the engine and session factory, or an empty config without a database."""
    if not settings.database_configured:
        return ApiConfig()
    engine = create_engine_from_settings(settings)
    return ApiConfig(engine=engine, session_factory=create_session_factory(engine))


def create_app(
    settings: Optional[Settings] = None,
    api: Optional[ApiConfig] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the process-wide ``settings``.
        api: Prebuilt ``ApiConfig``; built from ``settings`` when omitted.
             CRUD routes are registered only if it has a session factory.
    """
    settings = settings or default_settings
    api = api or build_api_config(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level)
        logger.info("Notely backend %s starting up", __version__)
        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.warning("%s", str(e))
        if api.db_configured:
            logger.info("Connected to database!")
        logger.info("Serving on port: %d", settings.port)

        yield

        logger.info("Notely backend shutting down...")
        if api.engine is not None:
            await api.engine.dispose()
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="Notely API",
        description="Notes API with API-key authentication.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.api = api

    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Link", "X-Request-ID"],
        max_age=300,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(index.router)
    app.include_router(health.router)
    if api.db_configured:
        guard = AuthGuard(DatabaseIdentityResolver(api.session_factory))
        app.include_router(users.build_router(api, guard))
        app.include_router(notes.build_router(api, guard))

    return app


app = create_app()
