"""
FastAPI application entry point for the messaging service.
"""
from contextlib import asynccontextmanager
from typing import Dict, List
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog
import uvicorn

from .api import api_router
from .core.config import settings
from .core.database import DatabaseHealthCheck, close_db_connections, init_models
from .core.exceptions import MessagingServiceError
from .core.logging_config import configure_logging
from .core.middleware import RequestTrackingMiddleware, SecurityHeadersMiddleware
from .core.redis import close_redis, initialize_redis, redis_manager
from .schemas.validation import ERROR_TEMPLATES, field_label

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    Handles startup and shutdown events.
    """
    logger.info("Starting messaging service", version=settings.VERSION, environment=settings.ENVIRONMENT)

    try:
        await initialize_redis()

        if settings.AUTO_CREATE_TABLES:
            await init_models()

        yield

    finally:
        logger.info("Shutting down messaging service")

        await close_redis()
        await close_db_connections()

        logger.info("Messaging service shutdown complete")


def _request_validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Render FastAPI's path/query validation errors as a field -> messages map."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part not in ("path", "query", "body")]
        field = str(loc[0]) if loc else "body"
        template = ERROR_TEMPLATES.get(error.get("type", ""))
        message = template.format(label=field_label(field)) if template else error.get("msg", "The value is invalid.")
        errors.setdefault(field, []).append(message)
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that turn service errors into JSON responses."""

    @app.exception_handler(MessagingServiceError)
    async def service_error_handler(request: Request, exc: MessagingServiceError):
        if exc.status_code >= 500:
            logger.error("Request failed", error_code=exc.error_code, error=exc.message)
        else:
            logger.info("Request rejected", error_code=exc.error_code, status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error", errors=exc.errors(), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_request_validation_errors(exc)
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"}
        )


def create_app() -> FastAPI:
    """Factory function to create the FastAPI app."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Direct messaging backend with bearer token authentication",
        version=settings.VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )

    # Security headers (outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    # Request tracking (innermost)
    app.add_middleware(RequestTrackingMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic liveness check."""
        return {"status": "healthy", "service": "messaging-service", "version": settings.VERSION}

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check against the database and Redis."""
        checks = {
            "database": await DatabaseHealthCheck.check_connection(),
            "redis": await redis_manager.health_check(),
        }
        ready = all(checks.values())
        return JSONResponse(
            status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "ready" if ready else "not_ready",
                "checks": checks,
                "service": "messaging-service",
                "version": settings.VERSION
            }
        )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


def run_dev():
    """Run development server."""
    uvicorn.run(
        "messaging_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="debug" if settings.DEBUG else "info"
    )


def run_prod():
    """Run production server."""
    uvicorn.run(
        "messaging_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info",
        access_log=False  # RequestTrackingMiddleware logs every request
    )


if __name__ == "__main__":
    if settings.DEBUG:
        run_dev()
    else:
        run_prod()
