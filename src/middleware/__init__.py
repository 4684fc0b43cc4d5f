"""Middleware package — error hierarchy, handlers, and request identifiers."""

from src.middleware.error_handler import (
    EnvelopeValidationError,
    ResponseConfigurationError,
    ResponseEnvelopeError,
    register_error_handlers,
)
from src.middleware.request_id import RequestIdMiddleware

__all__ = [
    "EnvelopeValidationError",
    "RequestIdMiddleware",
    "ResponseConfigurationError",
    "ResponseEnvelopeError",
    "register_error_handlers",
]
