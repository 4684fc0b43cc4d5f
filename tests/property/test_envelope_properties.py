"""Property tests for the status-conditional envelope rules.

Covers the traceId rule per status, the partial-status result rule and the
closed field set.
"""

from __future__ import annotations

import copy

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from src.config.identifiers import IdentifierConfig
from src.schemas.envelope import EnvelopeSchema
from src.schemas.outcome import DiagnosticKind, ValidationOutcome
from src.schemas.rules import ENVELOPE_FIELDS

from tests.conftest import json_values, message_codes, result_items, valid_uuids, versions

_CONFIG = IdentifierConfig(scope_identifier="test")
_SCHEMA = EnvelopeSchema(_CONFIG)

_BASE = {
    "message": {"code": "SUCCESS", "message": "Success"},
    "requestId": "test.requestId.22680f70-2f03-46c7-b230-14f4babbfbda",
    "timestamp": "2022-01-01T00:00:00Z",
    "version": "1.0.0",
}


def _envelope(status: str, **fields: object) -> dict:
    envelope = copy.deepcopy(_BASE)
    envelope["status"] = status
    envelope.update(fields)
    return envelope


trace_ids = valid_uuids.map(lambda u: f"test.traceId.{u}")
any_trace_values = trace_ids | st.text(max_size=40) | st.none()


# ---------------------------------------------------------------------------
# Success: traceId forbidden
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(data=json_values, code=message_codes, version=versions)
def test_success_without_trace_id_passes(data: object, code: str, version: str) -> None:
    envelope = _envelope(
        "success",
        data=data,
        message={"code": code, "message": "ok"},
        version=version,
    )
    assert _SCHEMA.validate(envelope).valid


@settings(max_examples=100)
@given(trace_id=any_trace_values)
def test_success_with_any_trace_id_fails(trace_id: object) -> None:
    outcome = _SCHEMA.validate(_envelope("success", traceId=trace_id))

    assert not outcome.valid
    assert outcome.fields == ["traceId"]
    assert outcome.diagnostics[0].kind is DiagnosticKind.CONDITIONAL_RULE_ERROR


# ---------------------------------------------------------------------------
# Error: traceId required
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(trace_id=trace_ids)
def test_error_with_valid_trace_id_passes(trace_id: str) -> None:
    assert _SCHEMA.validate(_envelope("error", traceId=trace_id)).valid


@settings(max_examples=50)
@given(data=json_values)
def test_error_without_trace_id_fails(data: object) -> None:
    outcome = _SCHEMA.validate(_envelope("error", data=data))
    assert outcome.fields == ["traceId"]


@settings(max_examples=100)
@given(uuid=valid_uuids, scope=st.sampled_from(["prod", "TEST", "tes"]))
def test_error_with_foreign_scope_fails(uuid: str, scope: str) -> None:
    outcome = _SCHEMA.validate(_envelope("error", traceId=f"{scope}.traceId.{uuid}"))
    assert outcome.fields == ["traceId"]
    assert outcome.diagnostics[0].kind is DiagnosticKind.FORMAT_ERROR


# ---------------------------------------------------------------------------
# Partial: result and traceId required
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(trace_id=trace_ids, items=st.lists(result_items, max_size=5))
def test_partial_with_result_and_trace_id_passes(trace_id: str, items: list) -> None:
    assert _SCHEMA.validate(_envelope("partial", traceId=trace_id, result=items)).valid


@settings(max_examples=100)
@given(items=st.lists(result_items, max_size=5))
def test_partial_without_trace_id_fails(items: list) -> None:
    outcome = _SCHEMA.validate(_envelope("partial", result=items))
    assert outcome.fields == ["traceId"]


@settings(max_examples=50)
@given(trace_id=trace_ids)
def test_partial_without_result_fails(trace_id: str) -> None:
    outcome = _SCHEMA.validate(_envelope("partial", traceId=trace_id))
    assert outcome.fields == ["result"]


@settings(max_examples=100)
@given(
    trace_id=trace_ids,
    items=st.lists(result_items, min_size=1, max_size=5),
    index=st.integers(min_value=0, max_value=4),
    bad_success=st.sampled_from(["true", 1, None, "yes"]),
)
def test_partial_with_bad_result_item_fails(
    trace_id: str, items: list, index: int, bad_success: object
) -> None:
    index = index % len(items)
    items[index] = {**items[index], "success": bad_success}

    outcome = _SCHEMA.validate(_envelope("partial", traceId=trace_id, result=items))
    assert outcome.fields == [f"result[{index}].success"]


# ---------------------------------------------------------------------------
# Closed field set
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(
    key=st.text(min_size=1, max_size=20).filter(lambda k: k not in ENVELOPE_FIELDS),
    value=json_values,
    status=st.sampled_from(["success", "error", "partial"]),
)
def test_unknown_field_always_fails(key: str, value: object, status: str) -> None:
    envelope = _envelope(
        status,
        traceId="test.traceId.22680f70-2f03-46c7-b230-14f4babbfbda",
        result=[],
    )
    if status == "success":
        del envelope["traceId"]
    envelope[key] = value

    outcome = _SCHEMA.validate(envelope)

    assert outcome.fields == [key]
    assert outcome.diagnostics[0].kind is DiagnosticKind.STRUCTURAL_ERROR
    assert outcome.diagnostics[0].reason == "is not allowed"


# ---------------------------------------------------------------------------
# Abort-early agrees with collect-all
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(
    status=st.sampled_from(["success", "error", "partial", "bogus"]),
    version=st.sampled_from(["1.0.0", "1.0", "01.0.0"]),
    code=st.sampled_from(["SUCCESS", "success", ""]),
)
def test_abort_early_is_prefix_of_collect_all(status: str, version: str, code: str) -> None:
    envelope = _envelope(status, version=version, message={"code": code, "message": "m"})

    full = EnvelopeSchema(_CONFIG).validate(envelope)
    first = EnvelopeSchema(_CONFIG, abort_early=True).validate(envelope)

    assert first.valid == full.valid
    assert first.diagnostics == full.diagnostics[:1]


# ---------------------------------------------------------------------------
# Arbitrary input never raises
# ---------------------------------------------------------------------------

_extreme_numbers = (
    st.floats(allow_nan=True, allow_infinity=True)
    | st.integers(min_value=10**300, max_value=10**400)
    | st.integers(min_value=-(10**400), max_value=-(10**300))
)

any_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=20) | _extreme_numbers,
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=6,
)

_nested = {
    "message": ("code", "message"),
    "warnings": ("code", "message"),
    "pagination": ("totalItems", "currentPage", "itemsPerPage", "totalPages"),
    "result": ("data", "success", "errorMessage"),
}


@st.composite
def arbitrary_envelopes(draw) -> dict:
    envelope = {}
    for name in draw(st.lists(st.sampled_from(ENVELOPE_FIELDS), unique=True)):
        keys = _nested.get(name)
        if keys and draw(st.booleans()):
            value = {key: draw(any_values) for key in keys}
            envelope[name] = [value] if name in ("result", "warnings") else value
        else:
            envelope[name] = draw(any_values)
    if draw(st.booleans()):
        envelope["status"] = draw(st.sampled_from(["success", "error", "partial"]))
    return envelope


@settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
@given(envelope=arbitrary_envelopes(), abort_early=st.booleans())
def test_validate_never_raises(envelope: dict, abort_early: bool) -> None:
    outcome = EnvelopeSchema(_CONFIG, abort_early=abort_early).validate(envelope)

    assert isinstance(outcome, ValidationOutcome)
    assert outcome.valid == (not outcome.diagnostics)


@settings(max_examples=100)
@given(candidate=any_values)
def test_validate_never_raises_for_non_envelopes(candidate: object) -> None:
    assert isinstance(_SCHEMA.validate(candidate), ValidationOutcome)
