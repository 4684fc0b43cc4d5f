"""Envelope schema — rules, validator and validation outcome types."""

from src.schemas.envelope import EnvelopeSchema, assert_valid_envelope, validate_envelope
from src.schemas.outcome import Diagnostic, DiagnosticKind, ValidationOutcome
from src.schemas.rules import ENVELOPE_FIELDS, STATUS_RULES, Presence, StatusRule

__all__ = [
    "ENVELOPE_FIELDS",
    "STATUS_RULES",
    "Diagnostic",
    "DiagnosticKind",
    "EnvelopeSchema",
    "Presence",
    "StatusRule",
    "ValidationOutcome",
    "assert_valid_envelope",
    "validate_envelope",
]
