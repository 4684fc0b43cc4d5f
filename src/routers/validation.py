"""Envelope validation endpoint.

- POST /api/v1/envelopes/validate — validate a candidate envelope body
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request

from src.middleware.error_handler import EnvelopeValidationError, request_identifiers
from src.models.responses import BackendStandardResponse, ResponseMessage, ResponseStatus
from src.schemas.envelope import EnvelopeSchema

logger = logging.getLogger(__name__)


def create_validation_router(*, schema: EnvelopeSchema, api_version: str) -> APIRouter:
    """Factory that creates the validation router.

    Parameters
    ----------
    schema:
        Envelope schema bound to the service's identifier configuration.
    api_version:
        Version stamped on the envelopes this router returns.
    """
    validation_router = APIRouter(prefix="/api/v1/envelopes", tags=["envelopes"])

    @validation_router.post("/validate")
    async def validate(request: Request, candidate: Any = Body(default=None)) -> dict:
        """Return a success envelope if ``candidate`` is valid, else raise 422.

        A missing or ``null`` body reaches the schema as None and is reported
        like any other non-object candidate.
        """
        request_id, _ = request_identifiers(request)
        outcome = schema.validate(candidate)

        if not outcome.valid:
            logger.info(
                "Rejected candidate envelope",
                extra={
                    "request_id": request_id,
                    "diagnostic_count": len(outcome.diagnostics),
                },
            )
            raise EnvelopeValidationError(outcome=outcome)

        return BackendStandardResponse(
            status=ResponseStatus.SUCCESS,
            message=ResponseMessage(code="VALID_ENVELOPE", message="Envelope is valid"),
            data=outcome.to_dict(),
            request_id=request_id,
            version=api_version,
        ).to_envelope()

    return validation_router
