"""Tests for the catalog registry, argument validation and result wrappers."""

import pytest

from snapshotmcp.tools import build_catalog, validate_arguments
from snapshotmcp.tools.base import error_result, result_boundary, success_result
from snapshotmcp.utils.exceptions import UpstreamError, ValidationError

CATALOG_ORDER = [
    "get_space",
    "list_spaces",
    "get_proposal",
    "list_proposals",
    "get_votes",
    "get_user_profile",
    "get_user_follows",
    "create_wallet",
    "import_wallet",
    "get_wallet_address",
    "create_proposal",
    "cast_vote",
    "follow_space",
    "unfollow_space",
]


def test_catalog_order_and_descriptors():
    catalog = build_catalog()
    assert catalog.tool_names == CATALOG_ORDER
    for descriptor in catalog.get_definitions():
        assert set(descriptor) == {"name", "description", "inputSchema"}
        assert descriptor["inputSchema"]["type"] == "object"


def test_enumerated_values_match_wire_contract():
    schemas = {d["name"]: d["inputSchema"]["properties"] for d in build_catalog().get_definitions()}
    assert schemas["list_spaces"]["order_by"]["enum"] == ["created", "updated", "followersCount", "proposalsCount"]
    assert schemas["list_proposals"]["state"]["enum"] == ["pending", "active", "closed"]
    assert schemas["list_proposals"]["order_by"]["enum"] == ["created", "updated", "start", "end", "votes"]
    assert schemas["get_votes"]["order_by"]["enum"] == ["created", "vp"]
    assert schemas["get_votes"]["first"]["default"] == 100
    assert schemas["create_proposal"]["type"]["enum"] == [
        "single-choice", "approval", "quadratic", "ranked-choice", "weighted", "basic",
    ]


def test_duplicate_registration_rejected():
    catalog = build_catalog()
    with pytest.raises(ValueError):
        catalog.register(next(iter(catalog)))


def test_validation_required_and_enum():
    schema = build_catalog().get("list_proposals").input_schema
    assert validate_arguments(schema, None) == {}
    assert validate_arguments(schema, {"state": None}) == {"state": None}
    with pytest.raises(ValidationError) as exc:
        validate_arguments(schema, {"state": "open"})
    assert exc.value.details == {"field": "state"}

    vote_schema = build_catalog().get("cast_vote").input_schema
    with pytest.raises(ValidationError, match="proposal_id"):
        validate_arguments(vote_schema, {"space": "a.eth", "proposal_id": None, "choice": 1})
    with pytest.raises(ValidationError):
        validate_arguments(vote_schema, ["not", "an", "object"])


def test_validation_leaves_types_to_handlers():
    schema = build_catalog().get("cast_vote").input_schema
    args = {"space": "a.eth", "proposal_id": "0x1", "choice": "abc"}
    assert validate_arguments(schema, args) is args


def test_result_wrapper_shapes():
    assert success_result({"x": 1}, space_id="a") == {"status": "success", "data": {"x": 1}, "space_id": "a"}
    assert error_result("boom") == {"status": "error", "error": "boom"}


@pytest.mark.asyncio
async def test_result_boundary_never_raises():
    @result_boundary("space_id")
    async def failing(ctx, args):
        raise UpstreamError("snapshot-graphql", "GraphQL errors: bad")

    @result_boundary("query")
    async def crashing(ctx, args):
        raise RuntimeError("kaput")

    res = await failing(None, {"space_id": "a.eth"})
    assert res == {
        "status": "error",
        "error": "GraphQL errors: bad",
        "space_id": "a.eth",
        "error_code": "UPSTREAM_ERROR",
    }
    res = await crashing(None, {"first": 1})
    assert res == {"status": "error", "error": "kaput", "query": {"first": 1}}
