"""Signing-identity catalog entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapshotmcp.tools.base import Operation, result_boundary

if TYPE_CHECKING:
    from snapshotmcp.context import GatewayContext


@result_boundary()
async def create_wallet(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return ctx.action_client.create_identity()


@result_boundary()
async def import_wallet(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return ctx.action_client.import_identity(args["private_key"])


@result_boundary()
async def get_wallet_address(ctx: "GatewayContext", args: dict[str, Any]) -> Any:
    return {"address": ctx.action_client.get_address()}


IDENTITY_OPERATIONS = [
    Operation(
        name="create_wallet",
        description=(
            "Create a new signing wallet for governance actions. The private key is "
            "returned once and kept in memory only"
        ),
        input_schema={"type": "object", "properties": {}},
        handler=create_wallet,
    ),
    Operation(
        name="import_wallet",
        description="Import an existing wallet from its private key to sign governance actions",
        input_schema={
            "type": "object",
            "properties": {
                "private_key": {
                    "type": "string",
                    "description": "Hex-encoded private key (with or without 0x prefix)",
                },
            },
            "required": ["private_key"],
        },
        handler=import_wallet,
    ),
    Operation(
        name="get_wallet_address",
        description="Get the address of the active signing wallet",
        input_schema={"type": "object", "properties": {}},
        handler=get_wallet_address,
    ),
]
