"""Envelope schema — structural and status-conditional validation.

Validation runs in three layers over a candidate (typically a dict decoded
from JSON):

1. Structural: every key must be a declared envelope field.
2. Per field: type and format checks, each field independently.
3. Conditional: once ``status`` is known to be valid, the matching
   :data:`STATUS_RULES` entry changes which fields are required or
   forbidden and whether ``result`` items are checked.

All failures are collected by default. With ``abort_early=True`` only the
first diagnostic is returned. Validation never raises for bad input.
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Callable, Iterable, Iterator, Mapping
from itertools import islice
from typing import Any

from src.config.identifiers import IdentifierConfig
from src.config.registry import get_registry
from src.middleware.error_handler import EnvelopeValidationError
from src.schemas.outcome import Diagnostic, DiagnosticKind, ValidationOutcome
from src.schemas.rules import (
    BASE_PRESENCE,
    ENVELOPE_FIELDS,
    MESSAGE_FIELDS,
    PAGINATION_FIELDS,
    RESULT_ITEM_FIELDS,
    STATUS_RULES,
    STATUS_VALUES,
    Presence,
    StatusRule,
    effective_presence,
)
from src.validators.identifier import IdentifierRole, validate_identifier
from src.validators.primitives import (
    validate_iso_timestamp,
    validate_message_code,
    validate_version,
)

logger = logging.getLogger(__name__)

Issues = Iterator[Diagnostic]


class ErrorMessages:
    invalid_message_code = "Invalid message code"
    invalid_request_id = "Invalid request id"
    invalid_trace_id = "Invalid trace id"
    invalid_version = "Invalid version"
    invalid_timestamp = "must be a valid ISO 8601 date"
    required = "is required"
    not_allowed = "is not allowed"
    empty_string = "is not allowed to be empty"


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _structural(path: str, reason: str) -> Diagnostic:
    return Diagnostic(path, reason, DiagnosticKind.STRUCTURAL_ERROR)


def _format(path: str, reason: str) -> Diagnostic:
    return Diagnostic(path, reason, DiagnosticKind.FORMAT_ERROR)


def _conditional(path: str, reason: str) -> Diagnostic:
    return Diagnostic(path, reason, DiagnosticKind.CONDITIONAL_RULE_ERROR)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    # Integers beyond the double range count as Infinity
    if isinstance(value, int):
        return -sys.float_info.max <= value <= sys.float_info.max
    return isinstance(value, float) and math.isfinite(value)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _unknown_keys(value: Mapping, allowed: Iterable[str], path: str) -> Issues:
    allowed = set(allowed)
    for key in value:
        if key not in allowed:
            yield _structural(_join(path, str(key)), ErrorMessages.not_allowed)


def _string(value: Any, path: str) -> Issues:
    if not isinstance(value, str):
        yield _format(path, "must be a string")
    elif not value:
        yield _format(path, ErrorMessages.empty_string)


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------


def _message(value: Any, path: str) -> Issues:
    if not isinstance(value, Mapping):
        yield _format(path, "must be an object")
        return

    yield from _unknown_keys(value, MESSAGE_FIELDS, path)

    if "code" not in value:
        yield _structural(_join(path, "code"), ErrorMessages.required)
    elif not isinstance(value["code"], str):
        yield _format(_join(path, "code"), "must be a string")
    elif not validate_message_code(value["code"]):
        yield _format(_join(path, "code"), ErrorMessages.invalid_message_code)

    if "message" not in value:
        yield _structural(_join(path, "message"), ErrorMessages.required)
    else:
        yield from _string(value["message"], _join(path, "message"))


def _warnings(value: Any, path: str) -> Issues:
    if _is_sequence(value):
        for index, item in enumerate(value):
            yield from _message(item, f"{path}[{index}]")
    else:
        yield from _message(value, path)


def _identifier(role: IdentifierRole, reason: str) -> Callable[..., Issues]:
    def check(value: Any, path: str, config: IdentifierConfig) -> Issues:
        if not isinstance(value, str):
            yield _format(path, "must be a string")
        elif not value:
            yield _format(path, ErrorMessages.empty_string)
        elif not validate_identifier(value, role, config):
            yield _format(path, reason)

    return check


_request_id = _identifier(IdentifierRole.REQUEST, ErrorMessages.invalid_request_id)
_trace_id = _identifier(IdentifierRole.TRACE, ErrorMessages.invalid_trace_id)


def _timestamp(value: Any, path: str) -> Issues:
    if not isinstance(value, str):
        yield _format(path, "must be a string")
    elif not validate_iso_timestamp(value):
        yield _format(path, ErrorMessages.invalid_timestamp)


def _version(value: Any, path: str) -> Issues:
    if not isinstance(value, str):
        yield _format(path, "must be a string")
    elif not validate_version(value):
        yield _format(path, ErrorMessages.invalid_version)


def _pagination(value: Any, path: str) -> Issues:
    if not isinstance(value, Mapping):
        yield _format(path, "must be an object")
        return

    yield from _unknown_keys(value, PAGINATION_FIELDS, path)
    for key in PAGINATION_FIELDS:
        if key not in value:
            yield _structural(_join(path, key), ErrorMessages.required)
        elif not _is_number(value[key]):
            yield _format(_join(path, key), "must be a number")


def _metadata(value: Any, path: str) -> Issues:
    if not isinstance(value, Mapping):
        yield _format(path, "must be an object")


def _result_item(value: Any, path: str) -> Issues:
    if not isinstance(value, Mapping):
        yield _format(path, "must be an object")
        return

    yield from _unknown_keys(value, RESULT_ITEM_FIELDS, path)

    if "data" not in value:
        yield _structural(_join(path, "data"), ErrorMessages.required)

    if "success" not in value:
        yield _structural(_join(path, "success"), ErrorMessages.required)
    elif not isinstance(value["success"], bool):
        yield _format(_join(path, "success"), "must be a boolean")

    if "errorMessage" in value:
        yield from _string(value["errorMessage"], _join(path, "errorMessage"))


def _result(value: Any, path: str, check_items: bool) -> Issues:
    if not _is_sequence(value):
        yield _format(path, "must be an array")
        return
    if check_items:
        for index, item in enumerate(value):
            yield from _result_item(item, f"{path}[{index}]")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class EnvelopeSchema:
    """Validator for the standard backend response envelope.

    Parameters
    ----------
    config:
        Identifier configuration used for ``requestId``/``traceId``. When
        omitted, the shared registry is snapshotted once per call.
    abort_early:
        Stop at the first failure instead of collecting all of them.
    """

    def __init__(
        self,
        config: IdentifierConfig | None = None,
        *,
        abort_early: bool = False,
    ) -> None:
        self._config = config
        self._abort_early = abort_early

    def validate(self, candidate: Any) -> ValidationOutcome:
        config = self._config if self._config is not None else get_registry().snapshot()

        issues = self._iter_issues(candidate, config)
        if self._abort_early:
            issues = islice(issues, 1)
        outcome = ValidationOutcome(tuple(issues))

        if not outcome.valid:
            status = candidate.get("status") if isinstance(candidate, Mapping) else None
            logger.debug(
                "Envelope failed validation with %d diagnostic(s)",
                len(outcome.diagnostics),
                extra={
                    "envelope_status": status if isinstance(status, str) else None,
                    "diagnostic_count": len(outcome.diagnostics),
                    "field": outcome.diagnostics[0].field,
                },
            )
        return outcome

    def _iter_issues(self, candidate: Any, config: IdentifierConfig) -> Issues:
        if not isinstance(candidate, Mapping):
            yield _structural("", "envelope must be an object")
            return

        yield from _unknown_keys(candidate, ENVELOPE_FIELDS, "")

        rule: StatusRule | None = None
        if "status" not in candidate:
            yield _structural("status", ErrorMessages.required)
        else:
            status = candidate["status"]
            if not isinstance(status, str) or status not in STATUS_VALUES:
                yield _format("status", f"must be one of [{', '.join(STATUS_VALUES)}]")
            else:
                rule = STATUS_RULES.get(status)

        presence = effective_presence(rule)
        for name in ENVELOPE_FIELDS:
            if name == "status":
                continue
            yield from self._check_field(candidate, name, presence[name], rule, config)

    def _check_field(
        self,
        candidate: Mapping,
        name: str,
        presence: Presence,
        rule: StatusRule | None,
        config: IdentifierConfig,
    ) -> Issues:
        conditional = presence is not BASE_PRESENCE[name]

        if name not in candidate:
            if presence is Presence.REQUIRED:
                if conditional:
                    yield _conditional(name, f"is required when status is '{candidate['status']}'")
                else:
                    yield _structural(name, ErrorMessages.required)
            return

        if presence is Presence.FORBIDDEN:
            yield _conditional(name, f"is not allowed when status is '{candidate['status']}'")
            return

        value = candidate[name]
        if name == "message":
            yield from _message(value, name)
        elif name == "requestId":
            yield from _request_id(value, name, config)
        elif name == "traceId":
            yield from _trace_id(value, name, config)
        elif name == "timestamp":
            yield from _timestamp(value, name)
        elif name == "warnings":
            yield from _warnings(value, name)
        elif name == "version":
            yield from _version(value, name)
        elif name == "pagination":
            yield from _pagination(value, name)
        elif name == "metadata":
            yield from _metadata(value, name)
        elif name == "result":
            yield from _result(value, name, rule is not None and rule.validate_result_items)
        # data: any value, including None


def validate_envelope(
    candidate: Any,
    config: IdentifierConfig | None = None,
    *,
    abort_early: bool = False,
) -> ValidationOutcome:
    """Validate ``candidate`` against the envelope schema."""
    return EnvelopeSchema(config, abort_early=abort_early).validate(candidate)


def assert_valid_envelope(
    candidate: Any,
    config: IdentifierConfig | None = None,
) -> Any:
    """Return ``candidate`` unchanged, or raise EnvelopeValidationError."""
    outcome = validate_envelope(candidate, config)
    if not outcome.valid:
        raise EnvelopeValidationError(outcome=outcome)
    return candidate
