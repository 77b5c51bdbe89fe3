#!/usr/bin/env python3
"""Live smoke checks against a running snapshot-mcp HTTP gateway.

Usage:
  python scripts/mcp_smoke.py
  python scripts/mcp_smoke.py --url http://localhost:3001 --space uniswapgovernance.eth
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from typing import Any

import httpx


def send(client: httpx.Client, url: str, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    resp = client.post(
        f"{url}/mcp",
        json={"jsonrpc": "2.0", "id": uuid.uuid4().hex[:8], "method": method, "params": params or {}},
    )
    resp.raise_for_status()
    return resp.json()


def call_tool(client: httpx.Client, url: str, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    envelope = send(client, url, "tools/call", {"name": name, "arguments": arguments})
    if "error" in envelope:
        raise RuntimeError(envelope["error"]["message"])
    return json.loads(envelope["result"]["content"][0]["text"])


def main() -> int:
    parser = argparse.ArgumentParser(description="snapshot-mcp smoke checks")
    parser.add_argument("--url", default="http://localhost:3001", help="Gateway base URL")
    parser.add_argument("--space", default="uniswapgovernance.eth", help="Space used for read checks")
    args = parser.parse_args()
    url = args.url.rstrip("/")
    failures = 0

    with httpx.Client(timeout=30.0) as client:
        health = client.get(f"{url}/health")
        print(f"health: {health.status_code} {health.json().get('status')}")

        init = send(client, url, "initialize", {"protocolVersion": "2024-11-05", "capabilities": {}})
        info = init["result"]
        print(f"initialize: {info['serverInfo']['name']} (protocol {info['protocolVersion']})")

        tools = send(client, url, "tools/list")["result"]["tools"]
        print(f"tools/list: {len(tools)} tools")
        for tool in tools:
            print(f"  - {tool['name']}: {tool['description']}")

        checks = [
            ("get_space", {"space_id": args.space}, "space"),
            ("list_proposals", {"space": args.space, "first": 5}, "proposals"),
            ("list_spaces", {"search": args.space.split(".")[0], "first": 3}, "spaces"),
        ]
        for name, arguments, key in checks:
            try:
                result = call_tool(client, url, name, arguments)
            except (httpx.HTTPError, RuntimeError, ValueError) as e:
                print(f"{name}: request failed: {e}")
                failures += 1
                continue
            if result.get("status") == "success" and result["data"].get(key) is not None:
                value = result["data"][key]
                size = len(value) if isinstance(value, list) else 1
                print(f"{name}: ok ({size} {key})")
            else:
                print(f"{name}: failed: {result.get('error', 'no data')}")
                failures += 1

        unknown = send(client, url, "not_a_method")
        print(f"unknown method: {unknown.get('error', {}).get('message')}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
