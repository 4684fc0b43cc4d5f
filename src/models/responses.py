"""Standard backend response envelope models.

These are the producer-side constructors: they fill in defaults and
serialize to the envelope JSON shape::

    {
      "status": "success" | "error" | "partial",
      "message": {"code": "SUCCESS", "message": "Success"},
      "data": ...,
      "requestId": "<scope>.requestId.<uuid>",
      "traceId": "<scope>.traceId.<uuid>",
      "timestamp": "2022-01-01T00:00:00.000Z",
      "warnings": ...,
      "version": "1.0.0",
      "pagination": {...},
      "metadata": {...},
      "result": [...]
    }

Validation of the serialized form is done by ``src.schemas``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from src.config.identifiers import IdentifierConfig
    from src.schemas.outcome import ValidationOutcome

T = TypeVar("T")

DEFAULT_VERSION = "1.0"


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


class ResponseStatus(str, Enum):
    """Overall status of a response."""

    SUCCESS = "success"
    ERROR = "error"
    PARTIAL = "partial"


class ResponseMessage(BaseModel):
    """Machine-readable code (``EXAMPLE_CODE``) plus human-readable text."""

    code: str
    message: str


class ResponseWarning(ResponseMessage):
    """A non-fatal issue reported alongside the response."""


class Pagination(BaseModel):
    """Pagination information for responses that return a list of items."""

    model_config = ConfigDict(populate_by_name=True)

    total_items: int | float = Field(alias="totalItems")
    current_page: int | float = Field(alias="currentPage")
    items_per_page: int | float = Field(alias="itemsPerPage")
    total_pages: int | float = Field(alias="totalPages")


class Result(BaseModel, Generic[T]):
    """Outcome of one sub-item of a batch operation (partial status)."""

    model_config = ConfigDict(populate_by_name=True)

    data: T
    success: bool
    error_message: str | None = Field(default=None, alias="errorMessage")

    def to_dict(self) -> dict[str, Any]:
        item = self.model_dump(mode="json", by_alias=True)
        if self.error_message is None:
            item.pop("errorMessage")
        return item


class BackendStandardResponse(BaseModel, Generic[T]):
    """Standardized backend response.

    ``timestamp`` defaults to the current time and ``version`` to ``"1.0"``
    when omitted or empty. Note that ``"1.0"`` is not a full
    ``MAJOR.MINOR.PATCH`` triple, so envelopes meant to pass validation must
    set ``version`` explicitly.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus
    message: ResponseMessage
    data: T | None = None
    request_id: str = Field(alias="requestId")
    trace_id: str | None = Field(default=None, alias="traceId")
    timestamp: str = Field(default_factory=utc_timestamp)
    warnings: list[ResponseWarning] | ResponseWarning | None = None
    version: str = DEFAULT_VERSION
    pagination: Pagination | None = None
    metadata: dict[str, Any] | None = None
    result: list[Result] | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def default_timestamp(cls, value: Any) -> Any:
        return value or utc_timestamp()

    @field_validator("version", mode="before")
    @classmethod
    def default_version(cls, value: Any) -> Any:
        return value or DEFAULT_VERSION

    def to_envelope(self) -> dict[str, Any]:
        """Serialize to the envelope JSON shape.

        Optional fields that were never given are omitted rather than sent as
        ``null``; ``data`` is kept when it was set explicitly, even to None.
        """
        dumped = self.model_dump(mode="json", by_alias=True)
        envelope: dict[str, Any] = {}
        for key, value in dumped.items():
            if value is None and not (key == "data" and "data" in self.model_fields_set):
                continue
            envelope[key] = value
        if self.result is not None:
            envelope["result"] = [item.to_dict() for item in self.result]
        return envelope

    def validate_envelope(self, config: IdentifierConfig | None = None) -> ValidationOutcome:
        """Run the envelope schema over :meth:`to_envelope`."""
        from src.schemas.envelope import validate_envelope

        return validate_envelope(self.to_envelope(), config)
