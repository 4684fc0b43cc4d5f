"""FastAPI application entry point.

Startup: load settings, configure logging, resolve the identifier
configuration and bind it explicitly to the middleware, error handlers and
envelope schema. Request handling never reads the shared configuration
registry.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.config.settings import ResponseSettings
from src.logging_config import configure_logging
from src.middleware.error_handler import ResponseConfigurationError, register_error_handlers
from src.middleware.request_id import RequestIdMiddleware
from src.routers.health import create_health_router
from src.routers.validation import create_validation_router
from src.schemas.envelope import EnvelopeSchema
from src.validators.primitives import validate_version

logger = logging.getLogger(__name__)


def create_app(settings: ResponseSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises ``ResponseConfigurationError`` if ``api_version`` is not a valid
    ``MAJOR.MINOR.PATCH`` triple, since every envelope the service emits
    would then fail validation.
    """
    settings = settings or ResponseSettings()

    if not validate_version(settings.api_version):
        raise ResponseConfigurationError(
            f"api_version {settings.api_version!r} is not a MAJOR.MINOR.PATCH version",
            api_version=settings.api_version,
        )

    config = settings.identifier_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: logging setup and startup/shutdown logs."""
        configure_logging(settings.log_level)
        logger.info(
            "Starting response envelope service on port %d (scope=%s)",
            settings.port,
            config.scope_identifier,
        )
        yield
        logger.info("Response envelope service shut down")

    app = FastAPI(
        title="Backend Standard Response Service",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.identifier_config = config
    app.state.api_version = settings.api_version

    # Register error handlers
    register_error_handlers(app)

    app.add_middleware(RequestIdMiddleware, config=config)

    app.include_router(create_health_router(config=config, api_version=settings.api_version))
    app.include_router(
        create_validation_router(
            schema=EnvelopeSchema(config),
            api_version=settings.api_version,
        )
    )

    return app


app = create_app()
