"""Health endpoint.

- GET /health — service status and the active identifier configuration
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from src.config.identifiers import IdentifierConfig
from src.middleware.error_handler import request_identifiers
from src.models.responses import BackendStandardResponse, ResponseMessage, ResponseStatus


def create_health_router(*, config: IdentifierConfig, api_version: str) -> APIRouter:
    """Factory that creates the health router with injected dependencies."""

    health_router = APIRouter(tags=["health"])

    @health_router.get("/health")
    async def health(request: Request) -> dict:
        """Service health check."""
        request_id, _ = request_identifiers(request)
        return BackendStandardResponse(
            status=ResponseStatus.SUCCESS,
            message=ResponseMessage(code="SUCCESS", message="Service is healthy"),
            data={
                "status": "healthy",
                "identifiers": config.model_dump(),
            },
            request_id=request_id,
            version=api_version,
        ).to_envelope()

    return health_router
