"""
Notepad Backend: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to one NoteStore.
Who:   uvicorn (`notepad.main:app`, see notepad/__main__.py) and the tests,
       which build apps around temporary stores.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  CORS (204)  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────┐ ┌─────────────────┐   │
    │  │ {prefix}/notes[/{id}]    │ │ GET /health     │   │
    │  └──────────────────────────┘ └─────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Store→500    │   │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  state.note_store: JsonFileNoteStore | SqlNoteStore │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, initialize the store
    Shutdown: close the store (disposes the SQL engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notepad import __version__
from notepad.config import settings
from notepad.exceptions import (
    MalformedBodyError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from notepad.middleware.cors import CORS_HEADERS, PermissiveCORSMiddleware
from notepad.middleware.logging import RequestLoggingMiddleware
from notepad.middleware.request_id import RequestIDMiddleware, request_id_var
from notepad.routes import health, notes
from notepad.stores import NoteStore, build_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before the store is initialized.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the note store on startup and close it on shutdown."""
    setup_logging()
    store: NoteStore = app.state.note_store

    logger.info("=" * 60)
    logger.info("Notepad API starting up (store=%s, prefix='%s')", store.name, settings.api_prefix)
    await store.initialize()
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Notepad API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str, details: Optional[dict] = None) -> JSONResponse:
    content = {"error": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError          → 400 (message echoes the condition)
        MalformedBodyError       → 400 ("Invalid JSON")
        RequestValidationError   → 400
        NotFoundError            → 404 ("Note not found")
        HTTPException 404 / 405  → 404 ("Not found", unmatched route)
        StoreError               → 500 ("Internal server error")
        Exception (fallback)     → 500 ("Internal server error")

    Internal details (paths, SQL errors, tracebacks) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, exc.message, exc.context)

    @app.exception_handler(MalformedBodyError)
    async def handle_malformed_body(request: Request, exc: MalformedBodyError):
        logger.warning("[%s] Malformed JSON body: %s", request_id_var.get(""), exc.context)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), exc.errors())
        return _error(400, "Invalid request")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # No route for this method + path: the API reports both cases as 404
        if exc.status_code in (404, 405):
            return _error(404, "Not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return _error(500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Runs outside the middleware stack, so the CORS headers are added here.
        """
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers=CORS_HEADERS,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[NoteStore] = None, api_prefix: Optional[str] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Note store to serve; defaults to build_store(settings)
        api_prefix: Route prefix for the notes routes; defaults to settings.api_prefix

    Returns:
        Fully configured FastAPI instance. `app.state.note_store` holds the store.
    """
    app = FastAPI(
        title="Notepad API",
        description="Personal notes: create, read, update and delete short text notes.",
        version=__version__,
        lifespan=lifespan,
        # "/api/notes/" must 404 like any other unknown path, not redirect
        redirect_slashes=False,
    )
    app.state.note_store = store if store is not None else build_store(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # CORS → RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PermissiveCORSMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    prefix = settings.api_prefix if api_prefix is None else api_prefix
    app.include_router(notes.router, prefix=prefix)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
