"""Global error hierarchy and FastAPI exception handlers.

All envelope-specific errors extend ResponseEnvelopeError. The FastAPI
exception handlers catch these errors (plus Pydantic's RequestValidationError
and unhandled exceptions) and return a standard envelope with
``status: "error"``, an UPPER_SNAKE message code and the request's
identifiers.
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.config.identifiers import IdentifierConfig
from src.config.registry import get_registry
from src.models.responses import BackendStandardResponse, ResponseMessage, ResponseStatus
from src.validators.identifier import IdentifierRole, new_identifier

if TYPE_CHECKING:
    from src.schemas.outcome import ValidationOutcome

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class ResponseEnvelopeError(Exception):
    """Base error for all envelope-specific errors."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class EnvelopeValidationError(ResponseEnvelopeError):
    """A candidate envelope failed validation — carries the diagnostics."""

    status_code = 422
    code = "INVALID_ENVELOPE"
    message = "Envelope failed validation"

    def __init__(
        self,
        message: str | None = None,
        *,
        outcome: ValidationOutcome,
        **kwargs: object,
    ) -> None:
        super().__init__(message, **kwargs)
        self.outcome = outcome
        self.details.setdefault(
            "diagnostics", [d.to_dict() for d in outcome.diagnostics]
        )


class ResponseConfigurationError(ResponseEnvelopeError):
    """Service settings cannot produce valid envelopes."""

    status_code = 500
    code = "CONFIGURATION_ERROR"
    message = "Invalid response envelope configuration"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def _identifier_config(request: Request) -> IdentifierConfig:
    config = getattr(request.app.state, "identifier_config", None)
    return config if config is not None else get_registry().snapshot()


def request_identifiers(request: Request) -> tuple[str, str]:
    """Return the request's (requestId, traceId), minting any that are missing."""
    config = _identifier_config(request)
    request_id = getattr(request.state, "request_id", None)
    trace_id = getattr(request.state, "trace_id", None)
    if request_id is None:
        request_id = str(new_identifier(IdentifierRole.REQUEST, config))
    if trace_id is None:
        trace_id = str(new_identifier(IdentifierRole.TRACE, config))
    return request_id, trace_id


def _envelope(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    metadata: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build a standard error envelope response."""
    request_id, trace_id = request_identifiers(request)
    body = BackendStandardResponse(
        status=ResponseStatus.ERROR,
        message=ResponseMessage(code=code, message=message),
        request_id=request_id,
        trace_id=trace_id,
        version=getattr(request.app.state, "api_version", DEFAULT_API_VERSION),
        metadata=metadata,
    )
    return JSONResponse(status_code=status_code, content=body.to_envelope())


async def _envelope_error_handler(
    request: Request, exc: ResponseEnvelopeError
) -> JSONResponse:
    """Handle ResponseEnvelopeError subclasses."""
    meta = exc.details if exc.details else None
    return _envelope(request, exc.status_code, exc.code, exc.message, metadata=meta)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI / Pydantic RequestValidationError (422)."""
    field_errors = [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    return _envelope(
        request,
        status_code=422,
        code="INVALID_REQUEST",
        message="Validation error",
        metadata={"fields": field_errors},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return _envelope(
        request,
        status_code=500,
        code=ResponseEnvelopeError.code,
        message=ResponseEnvelopeError.message,
    )


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(ResponseEnvelopeError, _envelope_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
