"""Public models for the response envelope."""

from src.models.responses import (
    BackendStandardResponse,
    Pagination,
    ResponseMessage,
    ResponseStatus,
    ResponseWarning,
    Result,
)

__all__ = [
    "BackendStandardResponse",
    "Pagination",
    "ResponseMessage",
    "ResponseStatus",
    "ResponseWarning",
    "Result",
]
