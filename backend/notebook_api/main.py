"""
Notebook API - FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires settings, the document store, the
       token verifier, middleware, exception handlers and routes.
Who:   Called by uvicorn (`notebook_api.main:app`) and by the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  app.state: store (DocumentStore)                   │
    │             verifier (TokenVerifier)                │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────┐          │
    │  │  Req ID  │→│  Logging    │→│  CORS    │          │
    │  └──────────┘ └─────────────┘ └──────────┘          │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────────┐ ┌────────────────┐   │
    │  │ / health │ │ /notes[/id]  │ │ /folders[/id]  │   │
    │  └──────────┘ └──────────────┘ └────────────────┘   │
    │                                                     │
    │  Exception Handlers → {"message": ...}:             │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ 401/403 auth │ 400 input/id │ 404 │ 500 store │  │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate identity settings (logged, not fatal)
    3. Connect the document store, optionally create its schema
    Shutdown (uvicorn maps SIGINT/SIGTERM to lifespan shutdown):
    1. Close the document store
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notebook_api import __version__
from notebook_api.config import Settings, settings as default_settings
from notebook_api.database import DocumentStore
from notebook_api.exceptions import (
    AuthenticationError,
    InvalidIdentifierError,
    NotebookError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from notebook_api.middleware.logging import RequestLoggingMiddleware
from notebook_api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from notebook_api.routes import folders, health, notes
from notebook_api.services.identity import TokenVerifier

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once from the lifespan (and from `python -m notebook_api`).
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the document store before serving; close it on shutdown.

    A store that cannot be reached at startup is logged, not fatal: requests
    fail with 500 and /health reports `disconnected` until it recovers.
    """
    config: Settings = app.state.settings
    store: DocumentStore = app.state.store

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Notebook API %s starting up...", __version__)

    try:
        config.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    await store.connect()
    if await store.ping():
        logger.info("Connected to document store")
        if config.db_auto_create_schema:
            await store.create_schema()
    else:
        logger.error("Document store connection failed; requests will fail until it is reachable")

    logger.info("Server ready on %s:%d", config.host, config.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notebook API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"message": ...}` responses.

    Handler hierarchy:
        AuthMissingError / AuthInvalidError  → 401 / 403
        ValidationError, InvalidIdentifierError, RequestValidationError → 400
        NotFoundError                        → 404
        StoreError                           → 500 (context logged, not returned)
        NotebookError (base)                 → its status_code
        StarletteHTTPException               → its status (unknown route, bad method)
        Exception (fallback)                 → 500

    Security: responses never include stack traces, SQL or exception types.
    """

    @app.exception_handler(AuthenticationError)
    async def handle_auth_error(request: Request, exc: AuthenticationError):
        rid = request_id_var.get("")
        logger.warning(
            "[%s] %s %s rejected: %s %s",
            rid, request.method, request.url.path, exc.message, exc.context.get("reason", ""),
        )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return _error(400, exc.message)

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid identifier: %s", rid, exc.context.get("raw_id"))
        return _error(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(NotebookError)
    async def handle_notebook_error(request: Request, exc: NotebookError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed: %s", rid, exc.errors())
        return _error(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside RequestIDMiddleware; the id survives on the shared scope state
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        response = _error(500, "An unexpected error occurred")
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    verifier: Optional[TokenVerifier] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:  Configuration; defaults to the process-wide `settings`
        store:     Document store; built from settings when omitted (not connected yet)
        verifier:  Token verifier; built from settings when omitted

    Returns: Fully configured FastAPI instance. The store is connected by the
    lifespan, or by the caller beforehand (the lifespan leaves a connected
    store as it is).
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Notebook API",
        description="Owner-scoped notes and folders behind bearer-token authentication.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else DocumentStore.from_settings(settings)
    app.state.verifier = verifier if verifier is not None else TokenVerifier.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(notes.router)
    app.include_router(folders.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `notebook_api.main:app` to be importable
app = create_app()
