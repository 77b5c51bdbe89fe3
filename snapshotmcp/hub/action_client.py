"""
Snapshot Action Client

Signs governance messages (proposal, vote, follow, unfollow) as EIP-712
typed data with the session identity and submits them to the Snapshot
sequencer.

Flow:
1. Require an active signing identity (fail fast otherwise, nothing is sent)
2. Build the message, resolving the snapshot block for proposals
3. Sign the typed data and POST {address, sig, data} to the sequencer
4. Return the sequencer receipt

Submissions are not idempotent: resending the same payload may create a
duplicate proposal or be rejected upstream.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional

import httpx
from loguru import logger

from snapshotmcp.hub.block_source import BlockSource
from snapshotmcp.identity.eip712 import (
    FOLLOW_TYPES,
    PROPOSAL_TYPES,
    SNAPSHOT_DOMAIN,
    UNFOLLOW_TYPES,
    EIP712Signer,
    TypedDataField,
    vote_types,
)
from snapshotmcp.identity.evm import EvmIdentity
from snapshotmcp.identity.session import SigningSession
from snapshotmcp.utils.exceptions import (
    ActionError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)

SERVICE = "snapshot-sequencer"
LATEST = "latest"
WALLET_WARNING = (
    "Store this private key securely. It is held in memory only and will not be "
    "shown again; re-import it with import_wallet after a restart."
)


class SnapshotActionClient:
    """Sign and submit Snapshot governance actions"""

    def __init__(
        self,
        session: SigningSession,
        block_source: BlockSource,
        *,
        sequencer_url: str = "https://seq.snapshot.org",
        app_name: str = "snapshot-mcp",
        proposal_duration_days: int = 7,
        default_voting_type: str = "single-choice",
        fallback_block: int = 21_500_000,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.session = session
        self.block_source = block_source
        self.sequencer_url = sequencer_url
        self.app_name = app_name
        self.proposal_duration_days = proposal_duration_days
        self.default_voting_type = default_voting_type
        self.fallback_block = fallback_block
        self.timeout = timeout
        self._clock = clock
        self._client = http_client
        self._owns_client = http_client is None
        self._submit_lock = asyncio.Lock()

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

    # Identity

    def create_identity(self) -> Dict[str, str]:
        identity = self.session.create()
        return {
            "address": identity.address,
            "private_key": f"0x{identity.private_key_hex}",
            "warning": WALLET_WARNING,
        }

    def import_identity(self, private_key: str) -> Dict[str, str]:
        try:
            identity = self.session.import_key(private_key)
        except ValueError as e:
            raise ValidationError("Invalid private key", field="private_key") from e
        return {"address": identity.address}

    def get_address(self) -> str:
        return self.session.require().address

    # Actions

    async def create_proposal(
        self,
        space: str,
        *,
        title: str,
        choices: List[str],
        body: str = "",
        voting_type: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        snapshot: Any = None,
        discussion: str = "",
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Create a proposal in `space`.

        `snapshot` of None or "latest" resolves the chain head; if that fails
        the configured fallback block is used and the receipt says so.
        """
        if not isinstance(choices, (list, tuple)) or not all(isinstance(c, str) for c in choices):
            raise ValidationError("choices must be an array of strings", field="choices")
        identity = self.session.require()
        try:
            now = int(self._clock())
            start_ts = int(start) if start is not None else now
            end_ts = int(end) if end is not None else now + self.proposal_duration_days * 86400
            block, source, warnings = await self._resolve_snapshot(snapshot)
            message = {
                "from": identity.address,
                "space": space,
                "timestamp": now,
                "type": voting_type or self.default_voting_type,
                "title": title,
                "body": body or "",
                "discussion": discussion or "",
                "choices": list(choices),
                "start": start_ts,
                "end": end_ts,
                "snapshot": block,
                "plugins": "{}",
                "app": self.app_name,
            }
            receipt = await self._submit(identity, PROPOSAL_TYPES, "Proposal", message, timeout=timeout)
        except Exception as e:
            raise ActionError("create proposal", {"space": space}) from e

        receipt["snapshot"] = block
        receipt["snapshot_source"] = source
        if warnings:
            receipt["warnings"] = warnings
        return receipt

    async def cast_vote(
        self,
        space: str,
        proposal: str,
        choice: Any,
        reason: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Cast a vote; `choice` is forwarded as given (1-based index or list)."""
        identity = self.session.require()
        try:
            message: Dict[str, Any] = {
                "from": identity.address,
                "space": space,
                "timestamp": int(self._clock()),
                "proposal": proposal,
                "choice": choice,
            }
            if isinstance(reason, str) and reason.strip():
                message["reason"] = reason
            message["app"] = self.app_name
            message["metadata"] = "{}"
            return await self._submit(identity, vote_types(message), "Vote", message, timeout=timeout)
        except Exception as e:
            raise ActionError("cast vote", {"space": space, "proposal": proposal}) from e

    async def follow_space(self, space: str, *, timeout: Optional[float] = None) -> Dict[str, Any]:
        identity = self.session.require()
        try:
            message = {"from": identity.address, "space": space, "timestamp": int(self._clock())}
            return await self._submit(identity, FOLLOW_TYPES, "Follow", message, timeout=timeout)
        except Exception as e:
            raise ActionError("follow space", {"space": space}) from e

    async def unfollow_space(self, space: str, *, timeout: Optional[float] = None) -> Dict[str, Any]:
        identity = self.session.require()
        try:
            message = {"from": identity.address, "space": space, "timestamp": int(self._clock())}
            return await self._submit(identity, UNFOLLOW_TYPES, "Unfollow", message, timeout=timeout)
        except Exception as e:
            raise ActionError("unfollow space", {"space": space}) from e

    # Internals

    async def _resolve_snapshot(self, snapshot: Any) -> tuple[int, str, List[str]]:
        """Return (block, source, warnings) where source is explicit, chain or fallback."""
        if snapshot is not None and snapshot != LATEST:
            return int(snapshot), "explicit", []
        try:
            return await self.block_source.latest_block_number(), "chain", []
        except (UpstreamError, UpstreamTimeoutError) as e:
            warning = (
                f"Could not resolve the latest block ({e.render()}); "
                f"using fallback block {self.fallback_block}"
            )
            logger.warning("{}", warning)
            return self.fallback_block, "fallback", [warning]

    async def _submit(
        self,
        identity: EvmIdentity,
        types: Dict[str, List[TypedDataField]],
        primary_type: str,
        message: Dict[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        sig = EIP712Signer.sign_typed_data(identity, SNAPSHOT_DOMAIN, types, primary_type, message)
        envelope = {
            "address": identity.address,
            "sig": sig,
            "data": EIP712Signer.to_typed_data_json(SNAPSHOT_DOMAIN, types, message),
        }
        effective_timeout = timeout if timeout is not None else self.timeout
        client = await self._get_client()

        async with self._submit_lock:
            logger.info("Submitting {} for {} to {}", primary_type, message.get("space"), self.sequencer_url)
            try:
                resp = await client.post(
                    self.sequencer_url,
                    json=envelope,
                    headers={"Accept": "application/json"},
                    timeout=effective_timeout,
                )
            except httpx.TimeoutException as e:
                raise UpstreamTimeoutError(f"submit {primary_type}", effective_timeout) from e
            except httpx.HTTPError as e:
                raise UpstreamError(SERVICE, "Submission failed") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not resp.is_success:
            reason = _sequencer_reason(body) or f"{resp.status_code} {resp.reason_phrase}"
            logger.warning("Sequencer rejected {}: {}", primary_type, reason)
            raise UpstreamError(SERVICE, reason, status_code=resp.status_code, errors=body)

        if not isinstance(body, dict):
            raise UpstreamError(SERVICE, "Sequencer response is not a JSON object", status_code=resp.status_code)
        logger.info("{} accepted: {}", primary_type, body.get("id"))
        return body


def _sequencer_reason(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    description = body.get("error_description")
    error = body.get("error")
    if description and error:
        return f"{error}: {description}"
    return description or error
