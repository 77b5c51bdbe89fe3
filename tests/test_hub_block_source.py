"""Tests for chain-head resolution."""

import httpx
import pytest

from snapshotmcp.hub.block_source import BlockSource
from snapshotmcp.utils.exceptions import UpstreamError, UpstreamTimeoutError

RPC_URL = "https://ethereum-rpc.publicnode.com"


@pytest.mark.asyncio
async def test_parses_hex_block(upstream):
    upstream.rpc = lambda body: {"jsonrpc": "2.0", "id": body["id"], "result": "0x1234"}
    source = BlockSource(RPC_URL, http_client=upstream.client())
    assert await source.latest_block_number() == 0x1234
    assert upstream.bodies("ethereum-rpc.publicnode.com")[0]["method"] == "eth_blockNumber"


@pytest.mark.asyncio
async def test_rpc_error_object(upstream):
    upstream.rpc = lambda body: {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "busy"}}
    with pytest.raises(UpstreamError, match="busy"):
        await BlockSource(RPC_URL, http_client=upstream.client()).latest_block_number()


@pytest.mark.asyncio
async def test_http_failure_and_timeout(upstream):
    upstream.rpc = lambda body: httpx.Response(503)
    with pytest.raises(UpstreamError):
        await BlockSource(RPC_URL, http_client=upstream.client()).latest_block_number()

    def slow(body):
        raise httpx.ConnectTimeout("slow")

    upstream.rpc = slow
    with pytest.raises(UpstreamTimeoutError):
        await BlockSource(RPC_URL, http_client=upstream.client()).latest_block_number()


@pytest.mark.asyncio
async def test_garbage_result(upstream):
    upstream.rpc = lambda body: {"jsonrpc": "2.0", "id": 1, "result": None}
    with pytest.raises(UpstreamError, match="Unexpected"):
        await BlockSource(RPC_URL, http_client=upstream.client()).latest_block_number()


@pytest.mark.asyncio
async def test_transport_cause_rendered_once(upstream):
    def refuse(body):
        raise httpx.ConnectError("connection refused")

    upstream.rpc = refuse
    with pytest.raises(UpstreamError) as exc:
        await BlockSource(RPC_URL, http_client=upstream.client()).latest_block_number()
    assert exc.value.render() == "eth_blockNumber failed: connection refused"
