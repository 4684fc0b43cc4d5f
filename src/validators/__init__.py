"""Validators for message codes, versions, timestamps and structured identifiers."""

from src.validators.identifier import (
    IdentifierRole,
    StructuredIdentifier,
    new_identifier,
    parse_identifier,
    validate_identifier,
)
from src.validators.primitives import (
    validate_iso_timestamp,
    validate_message_code,
    validate_uuid,
    validate_version,
)

__all__ = [
    "IdentifierRole",
    "StructuredIdentifier",
    "new_identifier",
    "parse_identifier",
    "validate_identifier",
    "validate_iso_timestamp",
    "validate_message_code",
    "validate_uuid",
    "validate_version",
]
