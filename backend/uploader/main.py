"""
FastAPI application entry point.
Builds the provider registry once and wires routes, CORS and metrics.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from uploader import __version__
from uploader.api.router import api_router
from uploader.config import Settings, settings as default_settings
from uploader.middleware.metrics_middleware import MetricsMiddleware
from uploader.storage.errors import ClientInputError, StorageError
from uploader.storage.factory import ProviderRegistry, build_provider_registry
from uploader.utils.logging import configure_logging


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Render a storage error kind as ``{error[, details]}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed or wrongly typed request input as a client-input error."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    return await storage_error_handler(request, ClientInputError("Invalid request", details=details or None))


def create_app(
    settings: Optional[Settings] = None,
    providers: Optional[ProviderRegistry] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to the environment-backed global settings
        providers: Pre-built registry; when omitted, credentials are resolved
            from ``settings`` for all providers
    """
    settings = settings or default_settings

    # Startup provider warnings must already go through the JSON handler
    configure_logging("cloud-upload-api", settings.log_level)

    app = FastAPI(
        title="Cloud Upload API",
        description="Presigned upload/download/delete URLs for AWS S3, Azure Blob Storage and Google Cloud Storage",
        version=__version__,
    )

    app.state.settings = settings
    app.state.providers = providers if providers is not None else build_provider_registry(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
        max_age=settings.cors_max_age,
    )

    # Metrics middleware (added after CORS so it wraps every request)
    app.add_middleware(MetricsMiddleware)

    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Cloud Upload API",
            "version": __version__,
            "environment": settings.environment,
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
