"""
Process context.

Built once by the entry point (HTTP server lifespan, stdio loop or tests)
and passed by reference into the dispatcher. It owns the data client with
its rate window, the action client with its signing session, and the
catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from snapshotmcp.config.schema import Config
from snapshotmcp.hub.action_client import SnapshotActionClient
from snapshotmcp.hub.block_source import BlockSource
from snapshotmcp.hub.graphql_client import SnapshotDataClient
from snapshotmcp.hub.rate_limit import RequestRateLimiter
from snapshotmcp.identity.session import SigningSession
from snapshotmcp.tools import ToolRegistry, build_catalog


@dataclass
class GatewayContext:
    config: Config
    data_client: SnapshotDataClient
    action_client: SnapshotActionClient
    catalog: ToolRegistry = field(default_factory=build_catalog)

    @property
    def session(self) -> SigningSession:
        return self.action_client.session

    async def aclose(self) -> None:
        await self.data_client.close()
        await self.action_client.block_source.close()
        await self.action_client.close()


def build_context(
    config: Optional[Config] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    clock: Optional[Callable[[], float]] = None,
) -> GatewayContext:
    """
    Wire both clients from configuration.

    `http_client`, when given, is shared by every upstream client and is not
    closed by `aclose()`.
    """
    config = config or Config()
    limiter = RequestRateLimiter(
        service="snapshot-hub",
        max_requests=config.hub.rate_limit_max_requests,
        window_seconds=config.hub.rate_limit_window_seconds,
    )
    data_client = SnapshotDataClient(
        config.hub.graphql_endpoint,
        rate_limiter=limiter,
        timeout=config.hub.request_timeout_seconds,
        http_client=http_client,
    )
    block_source = BlockSource(
        config.chain.rpc_url,
        timeout=config.chain.request_timeout_seconds,
        http_client=http_client,
    )
    action_kwargs = {"clock": clock} if clock is not None else {}
    action_client = SnapshotActionClient(
        SigningSession(),
        block_source,
        sequencer_url=config.hub.sequencer_url,
        app_name=config.actions.app_name,
        proposal_duration_days=config.actions.proposal_duration_days,
        default_voting_type=config.actions.default_voting_type,
        fallback_block=config.chain.fallback_block,
        timeout=config.hub.request_timeout_seconds,
        http_client=http_client,
        **action_kwargs,
    )
    return GatewayContext(config=config, data_client=data_client, action_client=action_client)
