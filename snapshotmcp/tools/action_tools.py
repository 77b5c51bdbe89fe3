"""Signed governance actions: proposals, votes, follows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapshotmcp.tools.base import Operation, result_boundary

if TYPE_CHECKING:
    from snapshotmcp.context import GatewayContext

VOTING_TYPES = ["single-choice", "approval", "quadratic", "ranked-choice", "weighted", "basic"]


@result_boundary("space")
async def create_proposal(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.action_client.create_proposal(
        args["space"],
        title=args["title"],
        choices=args["choices"],
        body=args.get("body") or "",
        voting_type=args.get("type"),
        start=args.get("start"),
        end=args.get("end"),
        snapshot=args.get("snapshot"),
        discussion=args.get("discussion") or "",
    )


@result_boundary("space", "proposal_id")
async def cast_vote(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.action_client.cast_vote(
        args["space"],
        args["proposal_id"],
        args["choice"],
        args.get("reason"),
    )


@result_boundary("space")
async def follow_space(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.action_client.follow_space(args["space"])


@result_boundary("space")
async def unfollow_space(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return await ctx.action_client.unfollow_space(args["space"])


SPACE = {"type": "string", "description": "The space ID (e.g. 'yourdao.eth')"}

ACTION_OPERATIONS = [
    Operation(
        name="create_proposal",
        description="Create a new governance proposal in a Snapshot space (requires a wallet)",
        input_schema={
            "type": "object",
            "properties": {
                "space": SPACE,
                "title": {"type": "string", "description": "Proposal title"},
                "body": {"type": "string", "description": "Proposal body (markdown)", "default": ""},
                "choices": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Voting choices, e.g. ['For', 'Against', 'Abstain']",
                },
                "type": {
                    "type": "string",
                    "enum": VOTING_TYPES,
                    "description": "Voting system",
                    "default": "single-choice",
                },
                "start": {
                    "type": "number",
                    "description": "Voting start as a unix timestamp in seconds (default: now)",
                },
                "end": {
                    "type": "number",
                    "description": "Voting end as a unix timestamp in seconds (default: 7 days after now)",
                },
                "snapshot": {
                    "type": ["number", "string"],
                    "description": "Block number for voting power, or 'latest'",
                    "default": "latest",
                },
                "discussion": {"type": "string", "description": "Discussion link", "default": ""},
            },
            "required": ["space", "title", "choices"],
        },
        handler=create_proposal,
    ),
    Operation(
        name="cast_vote",
        description="Cast a vote on a Snapshot proposal (requires a wallet)",
        input_schema={
            "type": "object",
            "properties": {
                "space": SPACE,
                "proposal_id": {"type": "string", "description": "The proposal ID to vote on"},
                "choice": {
                    "type": ["number", "array"],
                    "description": "1-based index of the chosen option (a list of indices for approval or ranked-choice)",
                },
                "reason": {"type": "string", "description": "Optional reason for the vote"},
            },
            "required": ["space", "proposal_id", "choice"],
        },
        handler=cast_vote,
    ),
    Operation(
        name="follow_space",
        description="Follow a Snapshot space (requires a wallet)",
        input_schema={
            "type": "object",
            "properties": {"space": SPACE},
            "required": ["space"],
        },
        handler=follow_space,
    ),
    Operation(
        name="unfollow_space",
        description="Unfollow a Snapshot space (requires a wallet)",
        input_schema={
            "type": "object",
            "properties": {"space": SPACE},
            "required": ["space"],
        },
        handler=unfollow_space,
    ),
]
