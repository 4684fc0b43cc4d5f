"""Structured JSON logging configuration.

Every entry is a JSON object with at least timestamp, level, logger,
message and request_id. The request and trace identifiers of the HTTP
request being served are bound to a context variable by the request-id
middleware and stamped onto records by :class:`RequestContextFilter`.
Validation failures add envelope_status, diagnostic_count and field.

SECURITY: secret-looking ``key=value`` fragments are redacted.
"""

from __future__ import annotations

import json
import logging
import re
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import IO


# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(api.key|secret|password|token|credential|authorization)"
    r"[\s]*[=:]\s*\S+",
    re.IGNORECASE,
)

# Optional record attributes copied into the entry when present
_CONTEXT_FIELDS = ("trace_id", "envelope_status", "diagnostic_count", "field")

_request_context: ContextVar[tuple[str | None, str | None]] = ContextVar(
    "request_context", default=(None, None)
)


def bind_request_context(request_id: str, trace_id: str) -> Token:
    """Attach identifiers to log records emitted in the current context."""
    return _request_context.set((request_id, trace_id))


def reset_request_context(token: Token) -> None:
    _request_context.reset(token)


class RequestContextFilter(logging.Filter):
    """Fill ``request_id``/``trace_id`` from the bound request context.

    Values passed explicitly through ``extra`` win.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        request_id, trace_id = _request_context.get()
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id
        if getattr(record, "trace_id", None) is None and trace_id is not None:
            record.trace_id = trace_id
        return True


class JsonFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _sanitize(record.getMessage()),
            "request_id": getattr(record, "request_id", None),
        }
        entry.update(
            (name, getattr(record, name))
            for name in _CONTEXT_FIELDS
            if hasattr(record, name)
        )

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = _sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)


def _sanitize(text: str) -> str:
    return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


def configure_logging(level: str = "INFO", stream: IO[str] | None = None) -> None:
    """Configure the root logger with JSON formatting.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    stream:
        Destination stream; defaults to stderr.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestContextFilter())
    root.addHandler(handler)
