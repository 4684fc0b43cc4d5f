"""Standalone predicates for message codes, UUIDs, versions and timestamps.

Every predicate returns ``False`` for input that is not a string instead of
raising, so they can be applied directly to untrusted deserialized values.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

# VALID_MESSAGE_CODE_EXAMPLE
MESSAGE_CODE_PATTERN = re.compile(r"^[A-Z]+(_[A-Z]+)*$")

# Version 1-5, RFC 4122 variant
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# 123.123.123 is valid
# 001.123.123 is invalid
# 1.1 is invalid
VERSION_PATTERN = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$", re.ASCII)

_ISO_TIMESTAMP_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[Tt ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.\d+)?)?"
    r"(?P<offset>[Zz]|[+-](?P<off_hour>\d{2})(?::?(?P<off_minute>\d{2}))?)?)?$",
    re.ASCII,
)


def validate_message_code(code: Any) -> bool:
    """Check that a message code is UPPER_SNAKE_CASE letters only."""
    if not isinstance(code, str) or len(code) == 0:
        return False
    return MESSAGE_CODE_PATTERN.fullmatch(code) is not None


def validate_uuid(value: Any) -> bool:
    """Check canonical 8-4-4-4-12 form with a version 1-5 / RFC 4122 variant."""
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.fullmatch(value) is not None


def validate_version(value: Any) -> bool:
    """Check a ``MAJOR.MINOR.PATCH`` triple without zero padding."""
    if not isinstance(value, str):
        return False
    return VERSION_PATTERN.fullmatch(value) is not None


def validate_iso_timestamp(value: Any) -> bool:
    """Check an ISO-8601 date or date-time string.

    Accepts a calendar date with an optional time (minutes, seconds and
    fractional seconds) separated by ``T``, ``t`` or a space, and an optional
    ``Z``/``z``/``±HH[:MM]`` offset. The components must form a real calendar
    instant.
    """
    if not isinstance(value, str):
        return False
    match = _ISO_TIMESTAMP_PATTERN.fullmatch(value)
    if match is None:
        return False

    parts = match.groupdict()
    try:
        datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
        )
    except ValueError:
        return False

    if parts["off_hour"] is not None and int(parts["off_hour"]) > 23:
        return False
    if parts["off_minute"] is not None and int(parts["off_minute"]) > 59:
        return False
    return True
