"""
Signing Session

Holds the one active signing identity for the lifetime of the process.
The identity is created or imported by an explicit call, kept in memory
only, and replaced wholesale on re-import. Nothing is written to disk.
"""

from __future__ import annotations

import threading
from typing import Optional

from loguru import logger

from snapshotmcp.identity.evm import EvmIdentity, generate_identity, identity_from_private_key
from snapshotmcp.utils.exceptions import NoIdentityError


class SigningSession:
    """
    In-memory signing identity holder.

    Usage:
        session = SigningSession()
        identity = session.create()          # or session.import_key("0x...")
        session.require().address            # raises NoIdentityError when empty
        session.clear()
    """

    def __init__(self) -> None:
        self._identity: Optional[EvmIdentity] = None
        self._lock = threading.Lock()

    @property
    def is_set(self) -> bool:
        with self._lock:
            return self._identity is not None

    @property
    def address(self) -> Optional[str]:
        with self._lock:
            return self._identity.address if self._identity else None

    def create(self) -> EvmIdentity:
        """Generate a new identity, replacing any current one."""
        identity = generate_identity()
        self._replace(identity)
        logger.info("Signing identity created: {}", identity.address)
        return identity

    def import_key(self, private_key_hex: str) -> EvmIdentity:
        """Import an identity from a hex private key, replacing any current one."""
        identity = identity_from_private_key(private_key_hex)
        self._replace(identity)
        logger.info("Signing identity imported: {}", identity.address)
        return identity

    def require(self) -> EvmIdentity:
        """Return the active identity or fail with NoIdentityError."""
        with self._lock:
            if self._identity is None:
                raise NoIdentityError()
            return self._identity

    def clear(self) -> None:
        with self._lock:
            self._identity = None

    def _replace(self, identity: EvmIdentity) -> None:
        with self._lock:
            previous = self._identity
            self._identity = identity
        if previous is not None and previous.address != identity.address:
            logger.warning("Signing identity {} replaced by {}", previous.address, identity.address)
