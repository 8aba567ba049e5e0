"""
AdoptMe Backend - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app()` builds the engine, the session factory, the password
       context and the upload FileService for the given settings, stores
       them on `app.state`, and registers middleware, exception handlers
       and routers.
Who:   uvicorn (`uvicorn adoptme.main:app`) and the test suite, which calls
       `create_app(test_settings)` for an isolated application.

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                       FastAPI App                         │
    │                                                           │
    │  Middleware:  Request ID → Access Log → GZip → CORS       │
    │                                                           │
    │  Routes:      /api/adoptions  /api/users  /api/pets       │
    │               /api/sessions   /api/mocks  /health  /      │
    │                                                           │
    │  Errors:      every failure → {"status": "error",         │
    │                                "error": <message>}        │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging, configuration check, optional create_all
    Shutdown:  dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from adoptme import __version__
from adoptme.config import Settings, settings as default_settings
from adoptme.database import build_engine, build_session_factory, create_all, dispose_engine
from adoptme.exceptions import (
    AdoptMeError,
    AuthenticationError,
    ConflictError,
    DatabaseError,
    FileStorageError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from adoptme.middleware import RequestIDFilter, RequestIDMiddleware, RequestLoggingMiddleware
from adoptme.routes import adoptions, health, home, mocks, pets, sessions, users
from adoptme.security import build_password_context
from adoptme.services import FileService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(app_settings: Settings) -> None:
    """
    Configure logging for the whole process.

    Development: every logger → stdout.
    Production:  additionally, the `adoptme.access` logger appends to
                 LOG_DIR/access.log.

    Every handler carries RequestIDFilter so `%(request_id)s` resolves for
    records emitted outside a request too.
    """
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.addFilter(RequestIDFilter())

    logging.basicConfig(
        level=getattr(logging, app_settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=[stream_handler],
        force=True,
    )

    access_logger = logging.getLogger("adoptme.access")
    for handler in list(access_logger.handlers):
        access_logger.removeHandler(handler)
        handler.close()

    if app_settings.is_production:
        log_dir = Path(app_settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "access.log", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        file_handler.addFilter(RequestIDFilter())
        access_logger.addHandler(file_handler)

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("faker").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings)
    logger.info("=" * 60)
    logger.info("AdoptMe Backend %s starting up (%s)...", __version__, app_settings.environment)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        if app_settings.is_production:
            raise
        logger.error("Configuration error: %s", str(e))

    if app_settings.db_create_all:
        await create_all(app.state.engine)

    logger.info("Upload root: %s", app.state.file_service.upload_root)
    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("API docs: http://%s:%d/api-docs", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("AdoptMe Backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "error": message})


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to `{"status": "error", "error": <message>}`.

        ValidationError          → 400
        PreconditionFailedError  → 400
        ConflictError            → 400
        AuthenticationError      → 401
        NotFoundError            → 404
        FileStorageError         → 500 (generic message)
        DatabaseError            → 500 (generic message)
        AdoptMeError (base)      → its status_code
        RequestValidationError   → 400 "Invalid request data"
        HTTPException            → its status, detail as the message
        Exception (fallback)     → 500 (generic message)

    Context dicts, driver errors and stack traces are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return error_response(400, exc.message)

    @app.exception_handler(PreconditionFailedError)
    async def handle_precondition_failed(request: Request, exc: PreconditionFailedError):
        logger.info("[%s] Precondition failed: %s | %s", _request_id(request), exc.reason, exc.context)
        return error_response(400, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s", _request_id(request), exc.message)
        return error_response(400, exc.message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info("[%s] Authentication failed: %s", _request_id(request), exc.message)
        return error_response(401, "Not authenticated")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File storage error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return error_response(500, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return error_response(500, "An internal error occurred. Please try again later.")

    @app.exception_handler(AdoptMeError)
    async def handle_adoptme_error(request: Request, exc: AdoptMeError):
        logger.error("[%s] %s: %s", _request_id(request), type(exc).__name__, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Request validation failed: %s", _request_id(request), exc.errors())
        return error_response(400, "Invalid request data")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": "error", "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", _request_id(request), str(exc), exc_info=True)
        return error_response(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app with; the module-level
                      `settings` (environment/.env) when omitted.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="AdoptMe API",
        description=(
            "Pet adoption service: users, pets, adoptions, cookie sessions "
            "and mock data generation."
        ),
        version=__version__,
        docs_url="/api-docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Shared State ──────────────────────────────────────────────────────
    engine = build_engine(app_settings)
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.pwd_context = build_password_context(app_settings)
    app.state.file_service = FileService(
        upload_root=app_settings.upload_root,
        max_upload_size=app_settings.max_upload_size,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials="*" not in app_settings.cors_origins_list,
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
    app.include_router(home.router)
    app.include_router(health.router)
    app.include_router(adoptions.router)
    app.include_router(users.router)
    app.include_router(pets.router)
    app.include_router(sessions.router)
    app.include_router(mocks.router)

    # Uploaded pet images and documents, addressed by their stored reference
    app.mount(
        "/public",
        StaticFiles(directory=str(app.state.file_service.upload_root)),
        name="public",
    )

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
