"""
Application Factory Module.

This module contains the factory function for creating a FastAPI application
with all necessary middleware, routers, exception handlers and state.
"""

# Standard Library Imports
import logging
import traceback
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

# Third-Party Imports
import sentry_sdk
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Application-Specific Imports
from rd_prediction.core.config import Settings, get_settings
from rd_prediction.core.exceptions import BaseException as AppBaseException
from rd_prediction.core.logging_config import setup_logging
from rd_prediction.domain.exceptions import (
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InvalidModelError,
    InvalidStatusTransitionError,
)
from rd_prediction.infrastructure.ml.dispatcher import ModelDispatcher
from rd_prediction.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_schema,
    create_session_factory,
)
from rd_prediction.infrastructure.security.jwt.jwt_service import JWTService
from rd_prediction.infrastructure.security.password.password_handler import PasswordHandler
from rd_prediction.infrastructure.services.gemini.gemini_service import GeminiEnrichmentService
from rd_prediction.presentation.api.schemas.common import ErrorItem, ErrorResponse
from rd_prediction.presentation.api.v1.api_router import api_router
from rd_prediction.presentation.middleware.request_id import RequestIdMiddleware
from rd_prediction.presentation.middleware.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."

DOMAIN_STATUS_CODES: dict[type[DomainException], int] = {
    InvalidModelError: status.HTTP_400_BAD_REQUEST,
    DuplicateEntityException: status.HTTP_400_BAD_REQUEST,
    EntityNotFoundException: status.HTTP_404_NOT_FOUND,
    InvalidStatusTransitionError: status.HTTP_409_CONFLICT,
}


# --- Helper Functions ---
def _initialize_sentry(settings: Settings) -> None:
    """Initializes Sentry if DSN is provided."""
    if settings.SENTRY_DSN:
        logger.info("Sentry DSN found, initializing Sentry.")
        sentry_sdk.init(
            dsn=str(settings.SENTRY_DSN),
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
            environment=settings.ENVIRONMENT,
            release=settings.API_VERSION,
        )
    else:
        logger.info("Sentry DSN not provided, skipping Sentry initialization.")


def _error_response(
    status_code: int,
    message: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, errors=[ErrorItem(**error) for error in errors] if errors else None)
    content = body.model_dump(exclude_none=True)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer", **(headers or {})}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _domain_status_code(exc: DomainException) -> int:
    for exc_type, status_code in DOMAIN_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Handles application startup and shutdown operations:
    1. Creates the database engine and session factory on app.state
    2. Creates missing tables
    3. Initializes Sentry (if configured)
    4. Disposes the engine on shutdown
    """
    current_settings: Settings = fastapi_app.state.settings
    logger.info(f"Starting {current_settings.API_TITLE} ({current_settings.ENVIRONMENT})")

    db_engine = create_engine(current_settings)
    try:
        fastapi_app.state.actual_session_factory = create_session_factory(db_engine)
        fastapi_app.state.db_engine = db_engine
        await create_schema(db_engine)
    except Exception:
        logger.critical("Failed to initialize database connection", exc_info=True)
        fastapi_app.state.actual_session_factory = None
        fastapi_app.state.db_engine = None
        await db_engine.dispose()
        raise

    _initialize_sentry(current_settings)

    try:
        yield
    finally:
        logger.info("Shutting down: disposing database engine")
        await db_engine.dispose()
        fastapi_app.state.actual_session_factory = None
        fastapi_app.state.db_engine = None


def create_application(
    settings_override: Settings | None = None,
    dispatcher_override: ModelDispatcher | None = None,
    enrichment_override: GeminiEnrichmentService | None = None,
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings_override: Override default settings (useful for testing)
        dispatcher_override: Use this model dispatcher instead of building one
        enrichment_override: Use this enrichment client instead of building one

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    current_settings = settings_override or get_settings()
    setup_logging(current_settings.LOG_LEVEL, current_settings.LOG_DIR)
    logger.info(f"Creating application for environment: {current_settings.ENVIRONMENT}")

    app_instance = FastAPI(
        title=current_settings.API_TITLE,
        description=current_settings.API_DESCRIPTION,
        version=current_settings.API_VERSION,
        lifespan=lifespan,
        debug=False if current_settings.ENVIRONMENT in ("test", "production") else current_settings.DEBUG,
    )

    # --- Exception handlers ---
    @app_instance.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.info(f"HTTP exception: {exc.status_code} - {exc.detail}")
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            return _error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app_instance.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return await starlette_http_exception_handler(request, exc)

    @app_instance.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "form")),
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        logger.warning(f"Validation error on {request.url.path}: {errors}")
        return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)

    @app_instance.exception_handler(AppBaseException)
    async def application_exception_handler(request: Request, exc: AppBaseException) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        errors = exc.detail if isinstance(exc.detail, list) else None
        return _error_response(exc.status_code, exc.message, errors)

    @app_instance.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        status_code = _domain_status_code(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"Unhandled domain error: {type(exc).__name__}: {exc}")
            return _error_response(status_code, INTERNAL_ERROR_MESSAGE)
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc}")
        return _error_response(status_code, str(exc))

    @app_instance.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Mask every unexpected error as a generic 500 and log it with its traceback."""
        logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}")
        logger.error("".join(traceback.format_exception(exc)))
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    # --- State ---
    app_instance.state.settings = current_settings
    app_instance.state.jwt_service = JWTService(current_settings)
    app_instance.state.password_handler = PasswordHandler(current_settings.PASSWORD_HASHING_SCHEMES)
    app_instance.state.model_dispatcher = dispatcher_override or ModelDispatcher(
        model_dir=current_settings.MODEL_DIR,
        demo_mode=current_settings.DEMO_MODE,
        max_image_bytes=current_settings.MAX_UPLOAD_SIZE_BYTES,
    )
    if enrichment_override is not None:
        app_instance.state.enrichment_service = enrichment_override
    else:
        api_key = current_settings.GEMINI_API_KEY
        app_instance.state.enrichment_service = GeminiEnrichmentService(
            api_key=api_key.get_secret_value() if api_key else None,
            model_name=current_settings.GEMINI_MODEL_NAME,
            timeout_seconds=current_settings.GEMINI_TIMEOUT_SECONDS,
            enabled=current_settings.enrichment_configured,
        )

    # --- Middleware ---
    if current_settings.BACKEND_CORS_ORIGINS:
        app_instance.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in current_settings.BACKEND_CORS_ORIGINS],
            allow_credentials=current_settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=current_settings.CORS_ALLOW_METHODS,
            allow_headers=current_settings.CORS_ALLOW_HEADERS,
        )
    app_instance.add_middleware(SecurityHeadersMiddleware, security_headers=current_settings.SECURITY_HEADERS)
    app_instance.add_middleware(RequestIdMiddleware)

    # --- Routers ---
    app_instance.include_router(api_router, prefix=current_settings.API_PREFIX)

    @app_instance.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"message": f"{current_settings.API_TITLE}. See /docs for API documentation."}

    logger.info("Application factory complete.")
    return app_instance
