"""Upstream Snapshot clients: hub GraphQL reads and sequencer submissions."""

from snapshotmcp.hub.action_client import SnapshotActionClient
from snapshotmcp.hub.block_source import BlockSource
from snapshotmcp.hub.graphql_client import SnapshotDataClient
from snapshotmcp.hub.rate_limit import RequestRateLimiter

__all__ = ["BlockSource", "RequestRateLimiter", "SnapshotActionClient", "SnapshotDataClient"]
