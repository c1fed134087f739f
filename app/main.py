"""
FastAPI application entry point.
Configures CORS, logging, exception handlers, and routes.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import (
    AppException,
    InvalidRecordError,
    NoDataError,
    ReportExportError,
    ValidationError,
    log_exception,
)
from app.db.session import close_db, get_session_context, init_db


logger = logging.getLogger(__name__)


async def seed_call_records() -> None:
    """Replace stored CDRs with a freshly generated period."""
    from app.core.dependencies import get_call_record_generator, get_report_exporter
    from app.services.call_record_store import CallRecordStore
    from app.services.cdr_service import CallDataRecordService

    async with get_session_context() as session:
        service = CallDataRecordService(
            CallRecordStore(session),
            get_call_record_generator(),
            get_report_exporter(),
        )
        generated = await service.regenerate()
    logger.info(f"Seeded {generated} CDRs on startup")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    settings.setup_logging()

    # Startup: Initialize database
    await init_db()
    if settings.generator.seed_on_startup:
        await seed_call_records()

    yield

    # Shutdown: Close database connections
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    allow_credentials = settings.cors_allow_credentials
    if "*" in settings.cors_origins and allow_credentials:
        allow_credentials = False
        logger.warning(
            "CORS allow_credentials=True is not compatible with allow_origins=['*']; "
            "forcing allow_credentials=False. Configure explicit origins to use credentials."
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if settings.logging.enable_request_logging:
        from app.api.middleware import RequestLoggingMiddleware

        app.add_middleware(RequestLoggingMiddleware)
        logger.info("Request logging middleware enabled")

    register_exception_handlers(app)
    register_routes(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers.

    Maps custom exceptions to appropriate HTTP status codes and response formats.
    Ensures internal details are not exposed to clients.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle identifier, date and range errors with 400 status."""
        log_exception(exc, "Validation error")
        return JSONResponse(
            status_code=400,
            content=exc.to_dict(),
        )

    @app.exception_handler(NoDataError)
    async def no_data_handler(
        request: Request, exc: NoDataError
    ) -> JSONResponse:
        """Handle empty result sets with 404 status."""
        log_exception(exc, "No data")
        return JSONResponse(
            status_code=404,
            content=exc.to_dict(),
        )

    @app.exception_handler(InvalidRecordError)
    async def invalid_record_handler(
        request: Request, exc: InvalidRecordError
    ) -> JSONResponse:
        """Handle stored records rejected by the aggregation with 422 status."""
        log_exception(exc, "Invalid call record")
        return JSONResponse(
            status_code=422,
            content=exc.to_dict(),
        )

    @app.exception_handler(ReportExportError)
    async def report_export_handler(
        request: Request, exc: ReportExportError
    ) -> JSONResponse:
        """Handle report file errors with 500 status, without the server path."""
        log_exception(exc, "Report export failed")
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.error_code,
                "message": exc.message,
            },
        )

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        """Handle generic application exceptions with 500 status."""
        log_exception(exc, "Application error")
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.error_code,
                "message": exc.message,
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions with 500 status.

        Logs the full exception but returns a generic message to the client
        to avoid exposing internal details.
        """
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
            },
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes."""
    from app.api.cdr import router as cdr_router
    from app.api.health import router as health_router
    from app.api.udr import router as udr_router

    app.include_router(health_router)
    app.include_router(cdr_router)
    app.include_router(udr_router)


# Create the application instance
app = create_app()
