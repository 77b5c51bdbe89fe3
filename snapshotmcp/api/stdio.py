"""Line transport: one JSON-RPC object per line on stdin, one reply per line on stdout."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Optional, TextIO

from loguru import logger

from snapshotmcp.api.rpc.dispatcher import McpDispatcher
from snapshotmcp.config.schema import Config
from snapshotmcp.context import GatewayContext, build_context


def _write(stream: TextIO, obj: Any) -> None:
    stream.write(json.dumps(obj, ensure_ascii=False) + "\n")
    stream.flush()


async def serve_lines(dispatcher: McpDispatcher, reader: TextIO, writer: TextIO) -> None:
    """Process lines until EOF. Blank or undecodable lines and notifications produce no output."""
    while True:
        line = await asyncio.to_thread(reader.readline)
        if not line:
            return
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Skipping undecodable line: {}", e)
            continue

        response = await dispatcher.handle(payload)
        if response is not None:
            _write(writer, response)


async def run_stdio_server(
    config: Optional[Config] = None,
    *,
    context: Optional[GatewayContext] = None,
    reader: TextIO = sys.stdin,
    writer: TextIO = sys.stdout,
) -> None:
    """Run the MCP gateway over stdio."""
    owned = context is None
    ctx = context or build_context(config)
    logger.info("Snapshot MCP gateway on stdio, hub {}", ctx.config.hub.hub_url)
    try:
        await serve_lines(McpDispatcher(ctx), reader, writer)
    finally:
        if owned:
            await ctx.aclose()
