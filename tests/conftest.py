"""Shared test fixtures and hypothesis strategies for the envelope test suite."""

from __future__ import annotations

import copy

import pytest
from hypothesis import strategies as st

from src.config.identifiers import IdentifierConfig
from src.config.registry import get_registry, reset_registry


VALID_UUID = "22680f70-2f03-46c7-b230-14f4babbfbda"
REQUEST_ID = f"test.requestId.{VALID_UUID}"
TRACE_ID = f"test.traceId.{VALID_UUID}"

_ENV_VARS = (
    "RESPONSE_SCOPE_IDENTIFIER",
    "RESPONSE_REQUEST_ID_KIND_NAME",
    "RESPONSE_TRACE_ID_KIND_NAME",
    "RESPONSE_IDENTIFIER_CONFIG_PATH",
    "RESPONSE_API_VERSION",
)


# ---------------------------------------------------------------------------
# Configuration registry — fresh "test" scope for every test
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _test_registry(monkeypatch: pytest.MonkeyPatch):
    """Reset the shared registry and configure the ``test`` scope."""
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)

    reset_registry()
    registry = get_registry()
    registry.scope_identifier = "test"
    registry.request_id_kind_name = "requestId"
    registry.trace_id_kind_name = "traceId"
    yield registry
    reset_registry()


@pytest.fixture
def identifier_config() -> IdentifierConfig:
    return IdentifierConfig(scope_identifier="test")


# ---------------------------------------------------------------------------
# Envelope fixtures
# ---------------------------------------------------------------------------

_VALID_ENVELOPE = {
    "status": "success",
    "message": {"code": "SUCCESS", "message": "Success"},
    "data": None,
    "requestId": REQUEST_ID,
    "timestamp": "2022-01-01T00:00:00Z",
    "warnings": {"code": "TEST", "message": "This is a test."},
    "metadata": {"test": "test"},
    "pagination": {
        "totalItems": 1,
        "currentPage": 1,
        "itemsPerPage": 1,
        "totalPages": 1,
    },
    "version": "1.0.0",
}


@pytest.fixture
def valid_envelope() -> dict:
    """A fully populated, valid success envelope (fresh copy per test)."""
    return copy.deepcopy(_VALID_ENVELOPE)


@pytest.fixture
def minimal_envelope() -> dict:
    return {
        "status": "success",
        "message": {"code": "SUCCESS", "message": "Success"},
        "requestId": REQUEST_ID,
        "timestamp": "2022-01-01T00:00:00Z",
        "version": "1.0.0",
    }


# ---------------------------------------------------------------------------
# Hypothesis strategies (reusable across property tests)
# ---------------------------------------------------------------------------

valid_uuids = st.sampled_from([1, 2, 3, 4, 5]).flatmap(
    lambda version: st.uuids(version=version)
).map(str)

message_codes = st.from_regex(r"[A-Z]{1,8}(_[A-Z]{1,8}){0,3}", fullmatch=True)

versions = st.tuples(
    st.integers(min_value=0, max_value=999),
    st.integers(min_value=0, max_value=999),
    st.integers(min_value=0, max_value=999),
).map(lambda parts: ".".join(str(p) for p in parts))

# Identifier segments: no dots, non-empty
segments = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-",
    min_size=1,
    max_size=12,
)

# Arbitrary JSON-like payloads for ``data`` / ``metadata`` values
json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=20),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=10,
)

result_items = st.builds(
    lambda data, success, error: (
        {"data": data, "success": success}
        if error is None
        else {"data": data, "success": success, "errorMessage": error}
    ),
    json_values,
    st.booleans(),
    st.none() | st.text(min_size=1, max_size=30),
)
