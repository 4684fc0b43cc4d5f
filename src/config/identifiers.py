"""Identifier configuration model and YAML loader.

Provides the immutable configuration consulted by the identifier codec
(scope identifier plus the kind names for request and trace identifiers)
and a loader that parses an optional YAML file into it.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class IdentifierRole(str, Enum):
    """Which envelope field an identifier belongs to."""

    REQUEST = "request"
    TRACE = "trace"


class IdentifierConfig(BaseModel):
    """Settings for ``<scope>.<kind>.<uuid>`` identifiers.

    Instances are frozen; use :meth:`with_changes` to derive a new one.
    """

    model_config = ConfigDict(frozen=True)

    scope_identifier: str = "unknown"
    request_id_kind_name: str = "requestId"
    trace_id_kind_name: str = "traceId"

    def kind_name_for(self, role: IdentifierRole | str) -> str:
        """Return the configured kind name for the given identifier role."""
        if IdentifierRole(role) is IdentifierRole.TRACE:
            return self.trace_id_kind_name
        return self.request_id_kind_name

    def with_changes(self, **changes: str) -> IdentifierConfig:
        return self.model_copy(update=changes)


DEFAULT_IDENTIFIER_CONFIG = IdentifierConfig()


def load_identifier_config(yaml_path: str) -> IdentifierConfig:
    """Parse an identifier configuration YAML file.

    Expected shape::

        identifiers:
          scope_identifier: billing
          request_id_kind_name: requestId
          trace_id_kind_name: traceId

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        The parsed IdentifierConfig. Keys missing from the file keep their
        defaults. If the file is absent or invalid, the built-in defaults
        are returned.
    """
    path = Path(yaml_path)

    if not path.exists():
        logger.warning("Identifier config file not found at %s — using built-in defaults", yaml_path)
        return DEFAULT_IDENTIFIER_CONFIG

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        logger.error("Failed to parse identifier config YAML at %s: %s", yaml_path, exc)
        return DEFAULT_IDENTIFIER_CONFIG

    if not isinstance(raw, dict) or not isinstance(raw.get("identifiers"), dict):
        logger.warning("Identifier config YAML missing 'identifiers' mapping — using built-in defaults")
        return DEFAULT_IDENTIFIER_CONFIG

    try:
        return IdentifierConfig.model_validate(raw["identifiers"])
    except Exception as exc:
        logger.error("Invalid identifier config in %s: %s — using built-in defaults", yaml_path, exc)
        return DEFAULT_IDENTIFIER_CONFIG
