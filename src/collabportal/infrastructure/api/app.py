"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from collabportal.core.config import get_settings
from collabportal.core.logging import configure_logging, get_logger
from collabportal.domain.exceptions import PortalError
from collabportal.domain.services.proposal_service import (
    DATE_RANGE_MESSAGE,
    is_date_check_violation,
)
from collabportal.infrastructure.api.middleware import CorrelationMiddleware
from collabportal.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

SERVICE_NAME = "CollabPortal"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings = get_settings()

    configure_logging(settings)
    logger.info(
        "Starting CollabPortal",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    if settings.storage_backend == "local":
        storage_path = Path(settings.storage_path)
        storage_path.mkdir(parents=True, exist_ok=True)
        logger.info("Storage directory created", path=str(storage_path))

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down CollabPortal")
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Brand and influencer collaboration portal",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(CorrelationMiddleware)

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_storage(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity or other dependencies.
        """
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint, including database connectivity."""
        if await get_db_manager().check_connection():
            return {
                "status": "ready",
                "service": SERVICE_NAME,
                "version": get_settings().app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": SERVICE_NAME,
                "database": "disconnected",
            },
        )

    @app.get("/live", tags=["health"])
    async def liveness_check():
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": SERVICE_NAME,
            "version": get_settings().app_version,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from collabportal.infrastructure.api.routes import (
        admin_proposals_router,
        admin_responses_router,
        auth_router,
        chats_router,
        invitations_router,
        notifications_router,
        password_reset_router,
        proposals_router,
        responses_router,
        signup_router,
        tags_router,
        users_router,
    )

    prefix = get_settings().api_prefix

    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(invitations_router, prefix=f"{prefix}/admin", tags=["invitations"])
    app.include_router(signup_router, prefix=prefix, tags=["invitations"])
    app.include_router(password_reset_router, prefix=prefix, tags=["password-reset"])
    app.include_router(tags_router, prefix=f"{prefix}/admin", tags=["tags"])
    app.include_router(users_router, prefix=f"{prefix}/admin", tags=["users"])
    app.include_router(admin_proposals_router, prefix=f"{prefix}/admin", tags=["proposals"])
    app.include_router(proposals_router, prefix=f"{prefix}/proposals", tags=["proposals"])
    app.include_router(
        admin_responses_router, prefix=f"{prefix}/admin/responses", tags=["responses"]
    )
    app.include_router(responses_router, prefix=f"{prefix}/responses", tags=["responses"])
    app.include_router(chats_router, prefix=f"{prefix}/chats", tags=["chats"])
    app.include_router(
        notifications_router, prefix=f"{prefix}/notifications", tags=["notifications"]
    )

    @app.get(prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        settings = get_settings()
        return {"name": settings.app_name, "version": settings.app_version}


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers.

    Every error leaves the API as ``{"error": message}``.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        else:
            logger.info(
                "Request rejected",
                path=request.url.path,
                status_code=exc.status_code,
                error=exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=422,
            content={"error": message, "details": jsonable_encoder(errors)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        if is_date_check_violation(exc):
            return JSONResponse(status_code=400, content={"error": DATE_RANGE_MESSAGE})
        logger.error(
            "Database error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        detail = getattr(exc, "orig", None) or exc
        return JSONResponse(status_code=500, content={"error": f"Database error: {detail}"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc) if get_settings().debug else "Internal server error",
            },
        )


def register_storage(app: FastAPI) -> None:
    """Serve locally stored uploads under ``/storage``.

    Args:
        app: FastAPI application instance.
    """
    settings = get_settings()
    if settings.storage_backend != "local":
        return
    app.mount(
        "/storage",
        StaticFiles(directory=settings.storage_path, check_dir=False),
        name="storage",
    )


# Create the application instance
app = create_app()
