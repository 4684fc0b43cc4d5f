"""Property tests for structured request and trace identifiers.

Validates that every response carries unique, valid X-Request-ID and
X-Trace-ID headers, and that valid incoming identifiers are propagated.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

from src.config.identifiers import IdentifierConfig
from src.middleware.request_id import RequestIdMiddleware
from src.validators.identifier import IdentifierRole, validate_identifier

from tests.conftest import valid_uuids

_CONFIG = IdentifierConfig(scope_identifier="svc", request_id_kind_name="req", trace_id_kind_name="trc")


# ---------------------------------------------------------------------------
# Minimal test app with RequestIdMiddleware
# ---------------------------------------------------------------------------

def _create_test_app() -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping(request: Request) -> dict:
        return {
            "request_id": request.state.request_id,
            "trace_id": request.state.trace_id,
        }

    app.add_middleware(RequestIdMiddleware, config=_CONFIG)
    return app


_app = _create_test_app()
_client = TestClient(_app, raise_server_exceptions=False)


@settings(max_examples=50)
@given(n=st.integers(min_value=2, max_value=20))
def test_minted_identifiers_are_unique_and_valid(n: int) -> None:
    collected_ids: list[str] = []

    for _ in range(n):
        resp = _client.get("/ping")
        rid = resp.headers.get("X-Request-ID")
        tid = resp.headers.get("X-Trace-ID")
        assert rid is not None, "X-Request-ID header must be present"
        assert tid is not None, "X-Trace-ID header must be present"

        assert validate_identifier(rid, IdentifierRole.REQUEST, _CONFIG)
        assert validate_identifier(tid, IdentifierRole.TRACE, _CONFIG)
        assert resp.json() == {"request_id": rid, "trace_id": tid}

        collected_ids.append(rid)

    assert len(set(collected_ids)) == len(collected_ids), "Request IDs must be unique"


@settings(max_examples=50)
@given(uuid=valid_uuids)
def test_valid_incoming_identifiers_are_reused(uuid: str) -> None:
    rid = f"svc.req.{uuid}"
    tid = f"svc.trc.{uuid}"

    resp = _client.get("/ping", headers={"X-Request-ID": rid, "X-Trace-ID": tid})

    assert resp.headers["X-Request-ID"] == rid
    assert resp.headers["X-Trace-ID"] == tid


@settings(max_examples=50)
@given(
    provided=st.one_of(
        valid_uuids,
        valid_uuids.map(lambda u: f"other.req.{u}"),
        valid_uuids.map(lambda u: f"svc.trc.{u}"),
        st.text(alphabet="abcdef0123456789.-", min_size=1, max_size=40),
    )
)
def test_invalid_incoming_request_id_is_replaced(provided: str) -> None:
    resp = _client.get("/ping", headers={"X-Request-ID": provided})

    rid = resp.headers["X-Request-ID"]
    assert rid != provided
    assert validate_identifier(rid, IdentifierRole.REQUEST, _CONFIG)
