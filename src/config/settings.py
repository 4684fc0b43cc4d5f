"""Pydantic Settings for the response envelope service.

All environment variables use the RESPONSE_ prefix.
Example: RESPONSE_SCOPE_IDENTIFIER=billing, RESPONSE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from src.config.identifiers import IdentifierConfig, load_identifier_config


class ResponseSettings(BaseSettings):
    """Service configuration validated from environment variables."""

    # Service
    port: int = Field(default=8002, ge=1, le=65535)
    log_level: str = "INFO"
    api_version: str = "1.0.0"  # Version stamped on envelopes we produce

    # Structured identifiers
    scope_identifier: str = "unknown"
    request_id_kind_name: str = "requestId"
    trace_id_kind_name: str = "traceId"
    identifier_config_path: str | None = None  # Overrides the three fields above

    model_config = {"env_prefix": "RESPONSE_"}

    def identifier_config(self) -> IdentifierConfig:
        """Build the identifier configuration these settings describe."""
        if self.identifier_config_path:
            return load_identifier_config(self.identifier_config_path)
        return IdentifierConfig(
            scope_identifier=self.scope_identifier,
            request_id_kind_name=self.request_id_kind_name,
            trace_id_kind_name=self.trace_id_kind_name,
        )
