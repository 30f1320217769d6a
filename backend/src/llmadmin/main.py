"""LLM Admin - FastAPI Application

This module creates and configures the FastAPI application for the LLM
administration backend.
"""

import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from .api import (
    configurations_router,
    dashboard_router,
    models_router,
    providers_router,
    quick_test_router,
    tasks_router,
)
from .core.config import get_settings_instance
from .core.database import close_db, init_db
from .core.exceptions import LLMAdminException
from .core.http_client import close_http_client
from .core.logging import get_logger, setup_logging
from .core.middleware import RequestIDMiddleware, SecurityHeadersMiddleware, TimingMiddleware
from .core.response import ApiResponse

logger = get_logger(__name__)
settings = get_settings_instance()


def generate_error_id() -> str:
    """Generate a unique error ID for tracking."""
    return f"ERR-{uuid.uuid4().hex[:8].upper()}"


def get_request_context(request: Request) -> dict[str, Any]:
    """Extract relevant context from request for error logging."""
    return {
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "user_agent": request.headers.get("user-agent"),
        "client_host": request.client.host if request.client else None,
        "request_id": getattr(request.state, "request_id", None),
    }


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()

    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Version: {settings.version}")
    logger.info(f"Environment: {settings.environment}")

    try:
        await init_db()
    except LLMAdminException as e:
        # Keep serving; /health reports the database state
        logger.error(f"Failed to initialize database: {e.message}")

    logger.info(f"{settings.app_name} startup complete")

    yield

    logger.info(f"Shutting down {settings.app_name}...")

    try:
        await close_http_client()
        logger.info("HTTP client connections closed")
    except Exception as e:
        logger.error(f"Error closing HTTP client connections: {e}")

    await close_db()

    logger.info(f"{settings.app_name} shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Administration API for LLM providers, models, configurations and tasks",
        version=settings.version,
        debug=settings.debug,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app)
    setup_exception_handlers(app)
    setup_routes(app)

    logger.info("LLM Admin FastAPI application created successfully")
    return app


def setup_middleware(app: FastAPI) -> None:
    """Register request ID, timing, security header and CORS middleware."""
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers that render the flat error envelope.

    Server errors (5xx) get an ``errorId`` that is also written to the log
    together with the request context.
    """

    @app.exception_handler(LLMAdminException)
    async def llmadmin_exception_handler(request: Request, exc: LLMAdminException):
        if exc.status_code >= 500:
            error_id = generate_error_id()
            logger.error(
                "Server error",
                extra={
                    "error_id": error_id,
                    "error_code": exc.error_code,
                    "error_message": exc.message,
                    "details": exc.details,
                    "request_context": get_request_context(request),
                },
            )
            return ApiResponse.failure(exc.message, status_code=exc.status_code, errorId=error_id)

        logger.warning(
            "Client error",
            extra={
                "error_code": exc.error_code,
                "error_message": exc.message,
                "request_context": get_request_context(request),
            },
        )
        return ApiResponse.failure(exc.message, status_code=exc.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        headers = getattr(exc, "headers", None) or None
        if exc.status_code >= 500:
            error_id = generate_error_id()
            logger.error(
                "HTTP server error",
                extra={"error_id": error_id, "detail": exc.detail, "request_context": get_request_context(request)},
            )
            return ApiResponse.failure(str(exc.detail), status_code=exc.status_code, headers=headers, errorId=error_id)

        logger.warning(
            "HTTP client error",
            extra={
                "status_code": exc.status_code,
                "detail": exc.detail,
                "request_context": get_request_context(request),
            },
        )
        return ApiResponse.failure(str(exc.detail), status_code=exc.status_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning(
            "Request validation failed",
            extra={"error_message": message, "request_context": get_request_context(request)},
        )
        return ApiResponse.failure(message, status_code=400)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        error_id = generate_error_id()
        include_traceback = settings.debug or settings.log_level == "DEBUG"

        logger.error(
            "Unhandled exception",
            extra={
                "error_id": error_id,
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "request_context": get_request_context(request),
            },
            exc_info=include_traceback,
        )

        if include_traceback:
            return ApiResponse.failure(
                "Internal server error",
                status_code=500,
                errorId=error_id,
                details={
                    "exceptionType": type(exc).__name__,
                    "exceptionMessage": str(exc),
                    "traceback": traceback.format_exc().split("\n"),
                },
            )
        return ApiResponse.failure("Internal server error", status_code=500, errorId=error_id)


def setup_routes(app: FastAPI) -> None:
    """Configure application routes."""
    for router in (
        dashboard_router,
        providers_router,
        models_router,
        configurations_router,
        tasks_router,
        quick_test_router,
    ):
        app.include_router(router, prefix=settings.api_v1_prefix)


# Configure logging before the app is built; the lifespan call is a no-op afterwards
setup_logging()

# Create application instance
app = create_app()
