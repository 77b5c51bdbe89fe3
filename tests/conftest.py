"""Pytest hooks and fixtures."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from snapshotmcp.config.schema import Config
from snapshotmcp.context import GatewayContext, build_context

FIXED_NOW = 1_700_000_000
HUB_HOST = "hub.snapshot.org"
SEQUENCER_HOST = "seq.snapshot.org"
RPC_HOST = "ethereum-rpc.publicnode.com"


Responder = Callable[[dict[str, Any]], Any]


class UpstreamStub:
    """
    MockTransport handler routing by host.

    Each responder receives the decoded JSON body and returns either a dict
    (sent as a 200 JSON response), an httpx.Response, or raises an
    httpx exception to simulate a transport failure.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.graphql: Responder = lambda body: {"data": {}}
        self.sequencer: Responder = lambda body: {"id": "0xreceipt", "ipfs": "bafy", "relayer": {}}
        self.rpc: Responder = lambda body: {"jsonrpc": "2.0", "id": 1, "result": hex(19_000_000)}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content or b"{}")
        responder = {
            HUB_HOST: self.graphql,
            SEQUENCER_HOST: self.sequencer,
            RPC_HOST: self.rpc,
        }.get(request.url.host)
        if responder is None:
            return httpx.Response(404, text="unknown host")
        outcome = responder(body)
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json=outcome)

    def bodies(self, host: str) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.host == host]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def context(config: Config, upstream: UpstreamStub) -> GatewayContext:
    return build_context(config, http_client=upstream.client(), clock=lambda: float(FIXED_NOW))


class StubDataClient:
    """Records calls and returns canned data."""

    def __init__(self, data: Any = None, error: Exception | None = None):
        self.data = data if data is not None else {}
        self.error = error
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        if not name.startswith("get_"):
            raise AttributeError(name)

        async def method(*args: Any, **kwargs: Any) -> Any:
            self.calls.append((name, args, kwargs))
            if self.error is not None:
                raise self.error
            return self.data

        return method

    async def close(self) -> None:
        return None


@pytest.fixture
def stub_data() -> StubDataClient:
    return StubDataClient()


@pytest.fixture
def stub_context(config: Config, upstream: UpstreamStub, stub_data: StubDataClient) -> GatewayContext:
    real = build_context(config, http_client=upstream.client(), clock=lambda: float(FIXED_NOW))
    return GatewayContext(config=config, data_client=stub_data, action_client=real.action_client)


@pytest.fixture
def fixed_now() -> int:
    return FIXED_NOW
