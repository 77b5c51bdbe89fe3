"""Read-only catalog entries backed by the hub GraphQL data client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapshotmcp.tools.base import QUERY_ECHO, Operation, result_boundary
from snapshotmcp.utils.exceptions import ValidationError
from snapshotmcp.utils.helpers import lower_identifier

if TYPE_CHECKING:
    from snapshotmcp.context import GatewayContext

MAX_PAGE = 100
MAX_VOTES_PAGE = 1000

ORDER_DIRECTION = {
    "type": "string",
    "enum": ["asc", "desc"],
    "description": "Order direction",
    "default": "desc",
}


def _arg(args: dict[str, Any], name: str, default: Any) -> Any:
    value = args.get(name)
    return default if value is None else value


def clamp_first(args: dict[str, Any], default: int, maximum: int) -> int:
    """min(requested or default, maximum); zero and negatives are not raised."""
    value = _arg(args, "first", default)
    try:
        return min(int(value), maximum)
    except (TypeError, ValueError) as e:
        raise ValidationError("first must be a number", field="first") from e


def _first_schema(noun: str, default: int, maximum: int | None) -> dict[str, Any]:
    suffix = f" (max {maximum})" if maximum else ""
    return {
        "type": "number",
        "description": f"Number of {noun} to return{suffix}",
        "default": default,
    }


def _skip_schema(noun: str) -> dict[str, Any]:
    return {
        "type": "number",
        "description": f"Number of {noun} to skip for pagination",
        "default": 0,
    }


@result_boundary("space_id")
async def get_space(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.data_client.get_space(args["space_id"])


@result_boundary(QUERY_ECHO)
async def list_spaces(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    where: dict[str, Any] = {}
    if args.get("search"):
        where["id_contains"] = args["search"].lower()
    if args.get("category"):
        where["categories_contains"] = [args["category"]]
    return await ctx.data_client.get_spaces(
        first=clamp_first(args, 20, MAX_PAGE),
        skip=_arg(args, "skip", 0),
        order_by=_arg(args, "order_by", "created"),
        order_direction=_arg(args, "order_direction", "desc"),
        where=where,
    )


@result_boundary("proposal_id")
async def get_proposal(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.data_client.get_proposal(args["proposal_id"])


@result_boundary(QUERY_ECHO)
async def list_proposals(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    where: dict[str, Any] = {}
    if args.get("space"):
        where["space"] = args["space"]
    if args.get("state"):
        where["state"] = args["state"]
    if args.get("author"):
        where["author"] = lower_identifier(args["author"])
    return await ctx.data_client.get_proposals(
        first=clamp_first(args, 20, MAX_PAGE),
        skip=_arg(args, "skip", 0),
        order_by=_arg(args, "order_by", "created"),
        order_direction=_arg(args, "order_direction", "desc"),
        where=where,
    )


@result_boundary("proposal_id", QUERY_ECHO)
async def get_votes(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.data_client.get_votes(
        args["proposal_id"],
        first=clamp_first(args, 100, MAX_VOTES_PAGE),
        skip=_arg(args, "skip", 0),
        order_by=_arg(args, "order_by", "created"),
        order_direction=_arg(args, "order_direction", "desc"),
    )


@result_boundary("address")
async def get_user_profile(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.data_client.get_user_profile(args["address"])


@result_boundary("address", QUERY_ECHO)
async def get_user_follows(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.data_client.get_user_follows(
        args["address"],
        first=clamp_first(args, 20, MAX_PAGE),
        skip=_arg(args, "skip", 0),
    )


USER_ADDRESS = {
    "type": "string",
    "description": "Ethereum address or ENS name of the user",
}

READ_OPERATIONS = [
    Operation(
        name="get_space",
        description="Get detailed information about a Snapshot space (DAO/community)",
        input_schema={
            "type": "object",
            "properties": {
                "space_id": {
                    "type": "string",
                    "description": "The space ID (usually an ENS name like 'uniswap.eth' or 'aave.eth')",
                },
            },
            "required": ["space_id"],
        },
        handler=get_space,
    ),
    Operation(
        name="list_spaces",
        description="List and search Snapshot spaces with filtering options",
        input_schema={
            "type": "object",
            "properties": {
                "first": _first_schema("spaces", 20, MAX_PAGE),
                "skip": _skip_schema("spaces"),
                "search": {"type": "string", "description": "Search term to filter spaces by name or ID"},
                "category": {"type": "string", "description": "Filter by category"},
                "order_by": {
                    "type": "string",
                    "enum": ["created", "updated", "followersCount", "proposalsCount"],
                    "description": "Field to order results by",
                    "default": "created",
                },
                "order_direction": ORDER_DIRECTION,
            },
        },
        handler=list_spaces,
    ),
    Operation(
        name="get_proposal",
        description="Get detailed information about a specific Snapshot proposal",
        input_schema={
            "type": "object",
            "properties": {
                "proposal_id": {"type": "string", "description": "The proposal ID (IPFS hash or hex string)"},
            },
            "required": ["proposal_id"],
        },
        handler=get_proposal,
    ),
    Operation(
        name="list_proposals",
        description="List and search proposals with filtering options",
        input_schema={
            "type": "object",
            "properties": {
                "space": {"type": "string", "description": "Filter by space ID"},
                "state": {
                    "type": "string",
                    "enum": ["pending", "active", "closed"],
                    "description": "Filter by proposal state",
                },
                "author": {"type": "string", "description": "Filter by proposal author address"},
                "first": _first_schema("proposals", 20, MAX_PAGE),
                "skip": _skip_schema("proposals"),
                "order_by": {
                    "type": "string",
                    "enum": ["created", "updated", "start", "end", "votes"],
                    "description": "Field to order results by",
                    "default": "created",
                },
                "order_direction": ORDER_DIRECTION,
            },
        },
        handler=list_proposals,
    ),
    Operation(
        name="get_votes",
        description="Get votes for a specific proposal",
        input_schema={
            "type": "object",
            "properties": {
                "proposal_id": {"type": "string", "description": "The proposal ID to get votes for"},
                "first": _first_schema("votes", 100, MAX_VOTES_PAGE),
                "skip": _skip_schema("votes"),
                "order_by": {
                    "type": "string",
                    "enum": ["created", "vp"],
                    "description": "Field to order results by",
                    "default": "created",
                },
                "order_direction": ORDER_DIRECTION,
            },
            "required": ["proposal_id"],
        },
        handler=get_votes,
    ),
    Operation(
        name="get_user_profile",
        description="Get user profile information and governance statistics",
        input_schema={
            "type": "object",
            "properties": {"address": USER_ADDRESS},
            "required": ["address"],
        },
        handler=get_user_profile,
    ),
    Operation(
        name="get_user_follows",
        description="Get spaces that a user follows",
        input_schema={
            "type": "object",
            "properties": {
                "address": USER_ADDRESS,
                "first": _first_schema("follows", 20, None),
                "skip": _skip_schema("follows"),
            },
            "required": ["address"],
        },
        handler=get_user_follows,
    ),
]
