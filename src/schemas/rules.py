"""Declarative envelope rules.

The envelope has a fixed, closed set of fields. Each field has a base
presence requirement, and the ``status`` value selects a :class:`StatusRule`
whose overrides are layered on top once ``status`` itself is valid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Presence(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


# Serialization order of the envelope
ENVELOPE_FIELDS: tuple[str, ...] = (
    "status",
    "message",
    "data",
    "requestId",
    "traceId",
    "timestamp",
    "warnings",
    "version",
    "pagination",
    "metadata",
    "result",
)

STATUS_VALUES: tuple[str, ...] = ("success", "error", "partial")

MESSAGE_FIELDS: tuple[str, ...] = ("code", "message")

PAGINATION_FIELDS: tuple[str, ...] = (
    "totalItems",
    "currentPage",
    "itemsPerPage",
    "totalPages",
)

RESULT_ITEM_FIELDS: tuple[str, ...] = ("data", "success", "errorMessage")

BASE_PRESENCE: Mapping[str, Presence] = MappingProxyType({
    "status": Presence.REQUIRED,
    "message": Presence.REQUIRED,
    "data": Presence.OPTIONAL,
    "requestId": Presence.REQUIRED,
    "traceId": Presence.OPTIONAL,
    "timestamp": Presence.REQUIRED,
    "warnings": Presence.OPTIONAL,
    "version": Presence.REQUIRED,
    "pagination": Presence.OPTIONAL,
    "metadata": Presence.OPTIONAL,
    "result": Presence.OPTIONAL,
})


@dataclass(frozen=True)
class StatusRule:
    """Presence overrides applied for one ``status`` value."""

    presence: Mapping[str, Presence] = field(default_factory=dict)
    validate_result_items: bool = False


STATUS_RULES: Mapping[str, StatusRule] = MappingProxyType({
    "partial": StatusRule(
        presence={"result": Presence.REQUIRED, "traceId": Presence.REQUIRED},
        validate_result_items=True,
    ),
    "error": StatusRule(presence={"traceId": Presence.REQUIRED}),
    "success": StatusRule(presence={"traceId": Presence.FORBIDDEN}),
})


def effective_presence(rule: StatusRule | None) -> dict[str, Presence]:
    """Merge a status rule's overrides over the base presence table."""
    presence = dict(BASE_PRESENCE)
    if rule is not None:
        presence.update(rule.presence)
    return presence
