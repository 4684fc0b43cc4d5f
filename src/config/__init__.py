"""Configuration module — settings, identifier config and the shared registry."""

from src.config.identifiers import (
    DEFAULT_IDENTIFIER_CONFIG,
    IdentifierConfig,
    IdentifierRole,
    load_identifier_config,
)
from src.config.registry import ConfigRegistry, get_registry, reset_registry
from src.config.settings import ResponseSettings

__all__ = [
    "DEFAULT_IDENTIFIER_CONFIG",
    "ConfigRegistry",
    "IdentifierConfig",
    "IdentifierRole",
    "ResponseSettings",
    "get_registry",
    "load_identifier_config",
    "reset_registry",
]
