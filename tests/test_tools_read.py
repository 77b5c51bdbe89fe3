"""Tests for the read-only catalog entries against a stub data client."""

import httpx
import pytest

from snapshotmcp.utils.exceptions import RateLimitExceeded


async def _call(ctx, name, args):
    return await ctx.catalog.get(name).handler(ctx, args)


@pytest.mark.asyncio
async def test_get_space_echoes_id(stub_context, stub_data):
    stub_data.data = {"space": {"id": "example.eth", "name": "Example"}}
    res = await _call(stub_context, "get_space", {"space_id": "example.eth"})
    assert res == {
        "status": "success",
        "data": {"space": {"id": "example.eth", "name": "Example"}},
        "space_id": "example.eth",
    }
    assert stub_data.calls == [("get_space", ("example.eth",), {})]


@pytest.mark.asyncio
async def test_list_spaces_clamps_and_builds_filter(stub_context, stub_data):
    args = {"first": 500, "search": "UniSwap", "category": "protocol"}
    res = await _call(stub_context, "list_spaces", args)
    assert res["query"] == args
    _, _, kwargs = stub_data.calls[0]
    assert kwargs == {
        "first": 100,
        "skip": 0,
        "order_by": "created",
        "order_direction": "desc",
        "where": {"id_contains": "uniswap", "categories_contains": ["protocol"]},
    }


@pytest.mark.asyncio
async def test_zero_and_negative_first_pass_through(stub_context, stub_data):
    await _call(stub_context, "list_spaces", {"first": 0})
    await _call(stub_context, "list_proposals", {"first": -5})
    assert stub_data.calls[0][2]["first"] == 0
    assert stub_data.calls[1][2]["first"] == -5


@pytest.mark.asyncio
async def test_list_proposals_lowercases_author_only(stub_context, stub_data):
    await _call(stub_context, "list_proposals", {"space": "Aave.eth", "state": "active", "author": "0xABC"})
    _, _, kwargs = stub_data.calls[0]
    assert kwargs["where"] == {"space": "Aave.eth", "state": "active", "author": "0xabc"}
    assert kwargs["first"] == 20


@pytest.mark.asyncio
async def test_get_votes_defaults_and_cap(stub_context, stub_data):
    res = await _call(stub_context, "get_votes", {"proposal_id": "0x1"})
    assert res["proposal_id"] == "0x1"
    assert res["query"] == {"proposal_id": "0x1"}
    assert stub_data.calls[0][2]["first"] == 100

    await _call(stub_context, "get_votes", {"proposal_id": "0x1", "first": 5000, "order_by": "vp"})
    assert stub_data.calls[1][2]["first"] == 1000
    assert stub_data.calls[1][2]["order_by"] == "vp"


@pytest.mark.asyncio
async def test_user_tools_echo_address(stub_context, stub_data):
    res = await _call(stub_context, "get_user_profile", {"address": "0xABC"})
    assert res["address"] == "0xABC"
    res = await _call(stub_context, "get_user_follows", {"address": "0xABC", "first": 250})
    assert res["address"] == "0xABC"
    assert stub_data.calls[1][2] == {"first": 100, "skip": 0}


@pytest.mark.asyncio
async def test_client_failure_becomes_error_wrapper(stub_context, stub_data):
    stub_data.error = RateLimitExceeded("snapshot-hub", limit=50, window_seconds=60)
    res = await _call(stub_context, "get_proposal", {"proposal_id": "0x1"})
    assert res["status"] == "error"
    assert res["error"] == "Rate limit exceeded. Please wait before making more requests."
    assert res["proposal_id"] == "0x1"
    assert "data" not in res


@pytest.mark.asyncio
async def test_numeric_string_first_is_coerced(stub_context, stub_data):
    await _call(stub_context, "list_spaces", {"first": "500"})
    await _call(stub_context, "get_votes", {"proposal_id": "0x1", "first": "7"})
    assert stub_data.calls[0][2]["first"] == 100
    assert stub_data.calls[1][2]["first"] == 7


@pytest.mark.asyncio
async def test_non_numeric_first_is_a_validation_error(stub_context, stub_data):
    res = await _call(stub_context, "list_proposals", {"first": "lots"})
    assert res["status"] == "error"
    assert res["error_code"] == "VALIDATION_ERROR"
    assert res["error"].startswith("first must be a number")
    assert stub_data.calls == []


@pytest.mark.asyncio
async def test_transport_cause_rendered_once(context, upstream):
    def refuse(body):
        raise httpx.ConnectError("connection refused")

    upstream.graphql = refuse
    res = await _call(context, "get_space", {"space_id": "a.eth"})
    assert res["error"] == "GraphQL request failed: connection refused"
    assert res["space_id"] == "a.eth"
