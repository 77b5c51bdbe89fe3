"""Tests for the structured error taxonomy."""

import asyncio

import httpx

from snapshotmcp.utils.exceptions import (
    ActionError,
    ErrorCategory,
    NoIdentityError,
    RateLimitExceeded,
    UnknownMethodError,
    UpstreamError,
    ValidationError,
    classify_exception,
    render_error,
    sanitize_error_message,
)


def _chained() -> ActionError:
    try:
        try:
            raise UpstreamError("snapshot-sequencer", "client_error: no voting power", status_code=400)
        except UpstreamError as inner:
            raise ActionError("cast vote") from inner
    except ActionError as outer:
        return outer


def test_render_joins_cause_chain_outermost_first():
    err = _chained()
    assert err.render() == "Failed to cast vote: client_error: no voting power"
    assert [r["code"] for r in err.chain()] == ["ACTION_FAILED", "UPSTREAM_ERROR"]


def test_chain_includes_foreign_causes():
    try:
        raise ActionError("follow space") from ValueError("bad key")
    except ActionError as e:
        chain = e.chain()
    assert chain[1] == {"code": "INVALID_VALUE", "message": "bad key"}


def test_to_dict_uses_rendered_message():
    data = _chained().to_dict()
    assert data["error"] == "ACTION_FAILED"
    assert data["category"] == "upstream"
    assert "no voting power" in data["message"]


def test_str_has_code_prefix():
    assert str(UnknownMethodError("x")) == "[UNKNOWN_METHOD] Unknown method: x"


def test_rate_limit_message_and_details():
    err = RateLimitExceeded("snapshot-hub", limit=50, window_seconds=60, retry_after=12.5)
    assert err.message == "Rate limit exceeded. Please wait before making more requests."
    assert err.details["limit"] == 50
    assert err.category is ErrorCategory.RATE_LIMIT


def test_no_identity_message_names_missing_identity():
    err = NoIdentityError()
    assert err.code == "NO_IDENTITY"
    assert "No signing identity" in err.message


def test_upstream_5xx_is_retryable():
    assert UpstreamError("hub", "boom", status_code=503).category is ErrorCategory.RETRYABLE
    assert UpstreamError("hub", "nope", status_code=400).category is ErrorCategory.UPSTREAM


def test_validation_error_carries_field():
    err = ValidationError("Missing required parameter: space_id", field="space_id")
    assert err.details == {"field": "space_id"}


def test_classify_foreign_exceptions():
    assert classify_exception(asyncio.TimeoutError())[0] == "TIMEOUT"
    assert classify_exception(httpx.ConnectError("refused"))[0] == "CONNECTION_ERROR"
    assert classify_exception(KeyError("x"))[0] == "MISSING_KEY"
    assert classify_exception(RuntimeError("x")) == ("INTERNAL_ERROR", ErrorCategory.FATAL, False)


def test_render_error_for_plain_exceptions():
    assert render_error(RuntimeError("boom")) == "boom"
    assert render_error(asyncio.TimeoutError()) == "Operation timed out"
    assert render_error(_chained()).startswith("Failed to cast vote: ")


def test_sanitize_strips_key_material():
    msg = sanitize_error_message("import failed private_key=0xabc123 token: zzz")
    assert "0xabc123" not in msg
    assert "zzz" not in msg
    assert "[REDACTED]" in msg
