"""Validation result types returned by the envelope schema."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnosticKind(str, Enum):
    """Category of an envelope validation failure."""

    STRUCTURAL_ERROR = "structural_error"  # unknown field, or required field missing
    FORMAT_ERROR = "format_error"  # field present but malformed
    CONDITIONAL_RULE_ERROR = "conditional_rule_error"  # status-dependent rule violated


@dataclass(frozen=True)
class Diagnostic:
    """A single failure, tied to a field path such as ``result[0].success``."""

    field: str
    reason: str
    kind: DiagnosticKind

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason, "kind": self.kind.value}


@dataclass(frozen=True)
class ValidationOutcome:
    """Pass/fail result of validating one candidate envelope.

    The outcome is valid iff it carries no diagnostics. Truthiness follows
    ``valid`` so callers can write ``if schema.validate(body): ...``.
    """

    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.diagnostics

    def __bool__(self) -> bool:
        return self.valid

    @property
    def fields(self) -> list[str]:
        return [d.field for d in self.diagnostics]

    def to_dict(self) -> dict:
        if self.valid:
            return {"valid": True}
        return {
            "valid": False,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
