"""Tests for the hub GraphQL data client over a mock transport."""

import httpx
import pytest

from snapshotmcp.hub.graphql_client import SnapshotDataClient
from snapshotmcp.hub.rate_limit import RequestRateLimiter
from snapshotmcp.utils.exceptions import RateLimitExceeded, UpstreamError, UpstreamTimeoutError

ENDPOINT = "https://hub.snapshot.org/graphql"


def _client(upstream, **kwargs) -> SnapshotDataClient:
    return SnapshotDataClient(ENDPOINT, http_client=upstream.client(), **kwargs)


@pytest.mark.asyncio
async def test_returns_data_and_sends_variables(upstream):
    upstream.graphql = lambda body: {"data": {"space": {"id": body["variables"]["id"]}}}
    client = _client(upstream)
    data = await client.get_space("example.eth")
    assert data == {"space": {"id": "example.eth"}}
    sent = upstream.bodies("hub.snapshot.org")[0]
    assert sent["operationName"] == "GetSpace"
    assert sent["variables"] == {"id": "example.eth"}


@pytest.mark.asyncio
async def test_graphql_errors_raise_upstream_error(upstream):
    upstream.graphql = lambda body: {"data": None, "errors": [{"message": "Unknown field"}]}
    with pytest.raises(UpstreamError) as exc:
        await _client(upstream).get_proposal("0x1")
    assert "Unknown field" in exc.value.message
    assert exc.value.errors == [{"message": "Unknown field"}]


@pytest.mark.asyncio
async def test_non_2xx_raises_with_status(upstream):
    upstream.graphql = lambda body: httpx.Response(502, text="bad gateway")
    with pytest.raises(UpstreamError) as exc:
        await _client(upstream).get_spaces(first=1)
    assert exc.value.status_code == 502
    assert "502" in exc.value.message


@pytest.mark.asyncio
async def test_timeout_maps_to_timeout_error(upstream):
    def hang(body):
        raise httpx.ReadTimeout("slow")

    upstream.graphql = hang
    with pytest.raises(UpstreamTimeoutError):
        await _client(upstream, timeout=1.5).get_space("a.eth")


@pytest.mark.asyncio
async def test_transport_failure_maps_to_upstream_error(upstream):
    def refuse(body):
        raise httpx.ConnectError("refused")

    upstream.graphql = refuse
    with pytest.raises(UpstreamError) as exc:
        await _client(upstream).get_space("a.eth")
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_51st_call_is_rejected_without_network(upstream):
    limiter = RequestRateLimiter(max_requests=50, window_seconds=60)
    client = _client(upstream, rate_limiter=limiter)
    for _ in range(50):
        await client.get_user_profile("0xabc")
    assert len(upstream.requests) == 50

    with pytest.raises(RateLimitExceeded):
        await client.get_user_profile("0xabc")
    assert len(upstream.requests) == 50

    limiter.window.window_start -= 61
    await client.get_user_profile("0xabc")
    assert len(upstream.requests) == 51


@pytest.mark.asyncio
async def test_identical_calls_hit_network_each_time(upstream):
    client = _client(upstream)
    await client.get_votes("0xabc")
    await client.get_votes("0xabc")
    assert len(upstream.requests) == 2


@pytest.mark.asyncio
async def test_transport_cause_rendered_once(upstream):
    def refuse(body):
        raise httpx.ConnectError("connection refused")

    upstream.graphql = refuse
    with pytest.raises(UpstreamError) as exc:
        await _client(upstream).get_space("a.eth")
    assert exc.value.render() == "GraphQL request failed: connection refused"


@pytest.mark.asyncio
async def test_anonymous_query_omits_operation_name(upstream):
    await _client(upstream).query("{ spaces { id } }")
    assert upstream.bodies("hub.snapshot.org") == [{"query": "{ spaces { id } }", "variables": {}}]
