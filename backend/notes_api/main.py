"""
Notes API — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database handle and NoteService, registers
       middleware, exception handlers and routes, and returns the app.
Who:   uvicorn (`uvicorn notes_api.main:app`) or `python -m notes_api`.

Application Architecture:
    Middleware:   Request ID → Logging → CORS
    Routes:       /api/notes (CRUD), /health
    Exceptions:   BadRequest→400 │ NotFound→404 │ StoreUnavailable/Internal→500

Lifecycle:
    Startup:
    1. Initialize logging
    2. Connect to the database (fatal on failure: the server never listens)
    3. Log the listening address

    Shutdown:
    1. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api import __version__
from notes_api.config import Settings, settings as default_settings
from notes_api.database import Database
from notes_api.exceptions import NotesError
from notes_api.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.routes import health, notes
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the database before serving and dispose it on shutdown.

    A connection failure is logged and re-raised; uvicorn then aborts
    startup, so no request is ever accepted without a working store.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(settings)
    logger.info("Notes API %s starting up...", __version__)

    try:
        await database.connect()
    except NotesError as e:
        logger.error("Error connecting to database: %s | Context: %s", e.message, e.context)
        raise
    logger.info("Connected to database")
    logger.info("Server running on port %d", settings.port)

    yield

    logger.info("Notes API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, **extra) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    body.update(extra)
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to one HTTP status and a JSON body with an `error` code.

    Handler table:
        NotesError subclasses     → their own status_code / error_code
        RequestValidationError    → 400 bad request (with per-field details)
        Starlette HTTPException   → its status (404 unknown route, 405, ...)
        Exception (fallback)      → 500 internal error
    Store details are logged server-side and never returned.
    """

    @app.exception_handler(NotesError)
    async def handle_notes_error(request: Request, exc: NotesError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Invalid request: %s", request_id_var.get(""), details)
        return JSONResponse(
            status_code=400,
            content=_error_body("bad request", "Request validation failed", details=details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        try:
            code = HTTPStatus(exc.status_code).phrase.lower()
        except ValueError:
            code = "error"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("internal error", "An unexpected error occurred."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The Database handle and NoteService are created here and attached to
    `app.state`; route dependencies read them from there.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Notes API",
        description="CRUD HTTP API for notes.",
        version=__version__,
        lifespan=lifespan,
    )

    database = Database(settings)
    app.state.settings = settings
    app.state.database = database
    app.state.note_service = NoteService(database)

    # Executes in reverse order of addition: Request ID → Logging → CORS
    allow_all = settings.cors_origins_list == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "notes_api.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
