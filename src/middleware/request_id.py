"""Request ID middleware.

Propagates (or generates) structured request and trace identifiers for every
incoming request, stores them in ``request.state.request_id`` and
``request.state.trace_id``, and adds ``X-Request-ID`` / ``X-Trace-ID``
response headers. While the request is handled the identifiers are bound
to the logging context.
"""

from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from src.config.identifiers import IdentifierConfig
from src.config.registry import get_registry
from src.logging_config import bind_request_context, reset_request_context
from src.validators.identifier import IdentifierRole, new_identifier, validate_identifier


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that assigns structured identifiers to each request.

    An incoming ``X-Request-ID`` or ``X-Trace-ID`` header is reused only when
    it is a valid identifier for its role under the active configuration
    (same scope, matching kind, valid UUID). Anything else is replaced with a
    freshly minted ``<scope>.<kind>.<uuid4>`` value.
    """

    def __init__(self, app: ASGIApp, config: IdentifierConfig | None = None) -> None:
        super().__init__(app)
        self._config = config

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        config = self._config if self._config is not None else get_registry().snapshot()

        request_id = _resolve(request.headers.get("x-request-id"), IdentifierRole.REQUEST, config)
        trace_id = _resolve(request.headers.get("x-trace-id"), IdentifierRole.TRACE, config)
        request.state.request_id = request_id
        request.state.trace_id = trace_id

        token = bind_request_context(request_id, trace_id)
        try:
            response: Response = await call_next(request)
        finally:
            reset_request_context(token)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Trace-ID"] = trace_id
        return response


def _resolve(provided: str | None, role: IdentifierRole, config: IdentifierConfig) -> str:
    if provided and validate_identifier(provided, role, config):
        return provided
    return str(new_identifier(role, config))
