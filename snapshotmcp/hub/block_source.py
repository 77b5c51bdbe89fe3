"""
Block Source

Resolves the current chain head over Ethereum JSON-RPC (eth_blockNumber).
Used to pick the voting-power snapshot block for new proposals.
"""

from __future__ import annotations

from typing import Optional

import httpx

from snapshotmcp.utils.exceptions import UpstreamError, UpstreamTimeoutError

SERVICE = "chain-rpc"


class BlockSource:
    """Read the latest block number from an Ethereum JSON-RPC endpoint"""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
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

    async def latest_block_number(self, timeout: Optional[float] = None) -> int:
        """Return the chain head height."""
        client = await self._get_client()
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_blockNumber",
            "params": [],
            "id": 1,
        }
        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            resp = await client.post(self.rpc_url, json=payload, timeout=effective_timeout)
            resp.raise_for_status()
            result = resp.json()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError("eth_blockNumber", effective_timeout) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                SERVICE,
                f"eth_blockNumber failed: {e.response.status_code} {e.response.reason_phrase}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(SERVICE, "eth_blockNumber failed") from e

        if not isinstance(result, dict) or "error" in result:
            error = result.get("error") if isinstance(result, dict) else result
            raise UpstreamError(SERVICE, f"RPC error: {error}", errors=error)

        raw = result.get("result")
        try:
            return int(raw, 16)
        except (TypeError, ValueError) as e:
            raise UpstreamError(SERVICE, f"Unexpected eth_blockNumber result: {raw!r}") from e
