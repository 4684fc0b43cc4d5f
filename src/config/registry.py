"""Process-wide identifier configuration registry.

The registry is created lazily on first access and seeded from
``ResponseSettings``. Mutation is a setup-time operation: nothing here is
locked, so do not change values while validations are running. Validators
take a :meth:`ConfigRegistry.snapshot` once per call, and callers that can
pass an explicit ``IdentifierConfig`` should prefer that.
"""

from __future__ import annotations

import logging

from src.config.identifiers import DEFAULT_IDENTIFIER_CONFIG, IdentifierConfig

logger = logging.getLogger(__name__)


class ConfigRegistry:
    """Mutable holder around an immutable :class:`IdentifierConfig`."""

    def __init__(self, config: IdentifierConfig | None = None) -> None:
        self._config = config or DEFAULT_IDENTIFIER_CONFIG

    def snapshot(self) -> IdentifierConfig:
        return self._config

    def update(self, **changes: str) -> IdentifierConfig:
        self._config = self._config.with_changes(**changes)
        logger.info("Identifier configuration updated: %s", ", ".join(sorted(changes)))
        return self._config

    def reset(self) -> None:
        self._config = DEFAULT_IDENTIFIER_CONFIG

    @property
    def scope_identifier(self) -> str:
        return self._config.scope_identifier

    @scope_identifier.setter
    def scope_identifier(self, value: str) -> None:
        self.update(scope_identifier=value)

    @property
    def request_id_kind_name(self) -> str:
        return self._config.request_id_kind_name

    @request_id_kind_name.setter
    def request_id_kind_name(self, value: str) -> None:
        self.update(request_id_kind_name=value)

    @property
    def trace_id_kind_name(self) -> str:
        return self._config.trace_id_kind_name

    @trace_id_kind_name.setter
    def trace_id_kind_name(self, value: str) -> None:
        self.update(trace_id_kind_name=value)


_registry: ConfigRegistry | None = None


def get_registry() -> ConfigRegistry:
    """Return the shared registry, creating it from the environment on first use."""
    global _registry
    if _registry is None:
        from src.config.settings import ResponseSettings

        _registry = ConfigRegistry(ResponseSettings().identifier_config())
    return _registry


def reset_registry() -> None:
    """Drop the shared registry so the next access re-reads the environment."""
    global _registry
    _registry = None
