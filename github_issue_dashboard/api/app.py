"""FastAPI application factory."""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..services import DashboardServices
from .errors import (
    ApiError,
    api_error_handler,
    unexpected_error_handler,
    validation_error_handler,
)
from .routes import dependencies, metadata, time_tracking, webhooks

logger = logging.getLogger(__name__)


def create_app(services: DashboardServices | None = None) -> FastAPI:
    """Create the API application around one services container.

    Args:
        services: Engines to serve. Built from environment configuration
            when omitted.
    """
    services = services or DashboardServices.init()

    app = FastAPI(
        title="GitHub Issue Dashboard API",
        description="Dependency analysis, time tracking and label metadata "
        "for GitHub issues",
        version=__version__,
    )
    app.state.services = services

    # Allow all localhost origins for local frontends
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"http://(localhost|127\.0\.0\.1):\d+",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(dependencies.router, prefix="/api/dependencies")
    app.include_router(time_tracking.router, prefix="/api/time")
    app.include_router(metadata.router, prefix="/api/metadata")
    app.include_router(webhooks.router, prefix="/api/webhooks")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    logger.info(f"API application created (v{__version__})")
    return app
