"""Structured identifier codec — ``<scope>.<kind>.<uuid>``.

Request and trace identifiers carry the issuing scope and their role so a
value copied into the wrong field (or minted by another deployment) is
rejected. Scope and kind names come from :class:`IdentifierConfig`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from src.config.identifiers import IdentifierConfig, IdentifierRole
from src.config.registry import get_registry
from src.validators.primitives import validate_uuid

SEPARATOR = "."


@dataclass(frozen=True)
class StructuredIdentifier:
    scope: str
    kind: str
    uuid: str

    def __str__(self) -> str:
        return SEPARATOR.join((self.scope, self.kind, self.uuid))


def parse_identifier(value: str) -> StructuredIdentifier:
    """Split an identifier into its three segments.

    Only the shape is checked here; scope, kind and UUID are not compared
    against configuration.

    Raises:
        ValueError: if ``value`` is not a string of exactly three non-empty
            dot-separated segments.
    """
    if not isinstance(value, str):
        raise ValueError(f"Identifier must be a string, got {type(value).__name__}")
    parts = value.split(SEPARATOR)
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Identifier {value!r} is not of the form <scope>.<kind>.<uuid>")
    return StructuredIdentifier(*parts)


def validate_identifier(
    value: Any,
    role: IdentifierRole | str,
    config: IdentifierConfig | None = None,
) -> bool:
    """Return True iff ``value`` is a well-formed identifier for ``role``.

    The scope must equal the configured scope identifier, the kind must equal
    the configured kind name for the role and the last segment must be a
    valid UUID. Never raises for bad input.
    """
    if config is None:
        config = get_registry().snapshot()
    try:
        identifier = parse_identifier(value)
    except ValueError:
        return False

    return (
        identifier.scope == config.scope_identifier
        and identifier.kind == config.kind_name_for(role)
        and validate_uuid(identifier.uuid)
    )


def new_identifier(
    role: IdentifierRole | str,
    config: IdentifierConfig | None = None,
) -> StructuredIdentifier:
    """Mint a fresh identifier for ``role`` using a random UUID4."""
    if config is None:
        config = get_registry().snapshot()
    return StructuredIdentifier(
        scope=config.scope_identifier,
        kind=config.kind_name_for(role),
        uuid=str(uuid.uuid4()),
    )
