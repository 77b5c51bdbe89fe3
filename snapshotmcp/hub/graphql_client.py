"""
Snapshot Hub Data Client

Issues GraphQL queries to the Snapshot hub and returns the decoded `data`
object. One request per call: no batching, no retry, no caching.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx
from loguru import logger

from snapshotmcp.hub import queries
from snapshotmcp.hub.queries import GraphQLRequest
from snapshotmcp.hub.rate_limit import RequestRateLimiter
from snapshotmcp.utils.exceptions import RateLimitExceeded, UpstreamError, UpstreamTimeoutError

SERVICE = "snapshot-graphql"


class SnapshotDataClient:
    """Query the Snapshot hub GraphQL API"""

    def __init__(
        self,
        endpoint: str,
        *,
        rate_limiter: Optional[RequestRateLimiter] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize data client.

        Args:
            endpoint: Full GraphQL URL, e.g. https://hub.snapshot.org/graphql
            rate_limiter: Shared request window; a default 50/60s one is created if omitted
            timeout: Default request timeout in seconds
            http_client: Optional pre-built client (tests inject a MockTransport)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RequestRateLimiter(service=SERVICE)
        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def query(
        self,
        query_text: str,
        variables: Optional[dict[str, Any]] = None,
        *,
        operation: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL query against the hub.

        Raises:
            RateLimitExceeded: local window exhausted; no request is sent
            UpstreamTimeoutError: the request exceeded its timeout
            UpstreamError: transport failure, non-2xx status or GraphQL errors
        """
        try:
            self.rate_limiter.acquire()
        except RateLimitExceeded:
            logger.warning("Snapshot hub rate limit reached, query {} not sent", operation or "(anonymous)")
            raise

        payload = GraphQLRequest(operation or "", query_text, variables or {}).to_payload()
        effective_timeout = timeout if timeout is not None else self.timeout

        client = await self._get_client()
        try:
            resp = await client.post(
                self.endpoint,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=effective_timeout,
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"graphql {operation or 'query'}", effective_timeout) from e
        except httpx.HTTPError as e:
            raise UpstreamError(SERVICE, "GraphQL request failed") from e

        if not resp.is_success:
            raise UpstreamError(
                SERVICE,
                f"GraphQL request failed: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError(SERVICE, "GraphQL response is not valid JSON", status_code=resp.status_code) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            raise UpstreamError(SERVICE, f"GraphQL errors: {json.dumps(errors)}", errors=errors)

        logger.debug(
            "GraphQL {} ok ({} requests left in window)",
            operation or "query",
            self.rate_limiter.remaining,
        )
        data = body.get("data") if isinstance(body, dict) else None
        return data or {}

    async def execute(self, request: GraphQLRequest, *, timeout: Optional[float] = None) -> dict[str, Any]:
        return await self.query(request.query, request.variables, operation=request.operation, timeout=timeout)

    async def get_space(self, space_id: str) -> dict[str, Any]:
        return await self.execute(queries.space_query(space_id))

    async def get_spaces(self, **options: Any) -> dict[str, Any]:
        return await self.execute(queries.spaces_query(**options))

    async def get_proposal(self, proposal_id: str) -> dict[str, Any]:
        return await self.execute(queries.proposal_query(proposal_id))

    async def get_proposals(self, **options: Any) -> dict[str, Any]:
        return await self.execute(queries.proposals_query(**options))

    async def get_votes(self, proposal_id: str, **options: Any) -> dict[str, Any]:
        return await self.execute(queries.votes_query(proposal_id, **options))

    async def get_user_profile(self, address: str) -> dict[str, Any]:
        return await self.execute(queries.user_query(address))

    async def get_user_follows(self, address: str, **options: Any) -> dict[str, Any]:
        return await self.execute(queries.follows_query(address, **options))
