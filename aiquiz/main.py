"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from prometheus_fastapi_instrumentator import Instrumentator
import uvicorn

from .core.config import Settings, settings as default_settings
from .services.quiz_generator import AIQuestionGenerator
from .services.telemetry import RequestCounters
from .api import api_router
from .api.system import router as health_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL, logging.INFO),
    format=default_settings.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Initialize Sentry if configured
if default_settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=default_settings.SENTRY_DSN,
        environment=default_settings.ENVIRONMENT,
        integrations=[FastApiIntegration(transaction_style="endpoint")],
        traces_sample_rate=default_settings.SENTRY_TRACES_SAMPLE_RATE,
    )


def create_app(generator: Optional[AIQuestionGenerator] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        generator: Pre-built question generator; when omitted one is created
            from settings (loading all models) during startup
        settings: Settings override, defaults to the environment settings
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")

        owns_generator = generator is None
        if owns_generator:
            app.state.generator = AIQuestionGenerator.from_settings(settings)
        else:
            app.state.generator = generator

        if app.state.generator.are_models_loaded():
            logger.info("All models loaded")
        else:
            logger.warning("Starting with missing models; fallback content will be served")

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.APP_NAME}...")
        if owns_generator:
            app.state.generator.shutdown()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url=settings.DOCS_URL if not settings.is_production() else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.counters = RequestCounters()
    if generator is not None:
        app.state.generator = generator

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request.app.state.counters.total_requests.add()
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms")
        return response

    # Add Prometheus metrics
    if settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "message": exc.detail,
                    "type": "http_error",
                    "status_code": exc.status_code,
                }
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": {
                    "message": "Validation error",
                    "type": "validation_error",
                    "details": jsonable_encoder(exc.errors()),
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        if settings.is_production():
            message = "An internal error occurred"
        else:
            message = str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"message": message, "type": "internal_error"}},
        )

    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "aiquiz.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        workers=default_settings.WORKERS,
        reload=default_settings.RELOAD,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
