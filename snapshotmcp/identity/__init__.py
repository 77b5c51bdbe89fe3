"""Identity helpers."""

from snapshotmcp.identity.eip712 import EIP712Domain, EIP712Signer, TypedDataField
from snapshotmcp.identity.evm import (
    EvmIdentity,
    generate_identity,
    identity_from_private_key,
    recover_address,
    sign_digest,
)
from snapshotmcp.identity.session import SigningSession

__all__ = [
    "EIP712Domain",
    "EIP712Signer",
    "TypedDataField",
    "EvmIdentity",
    "generate_identity",
    "identity_from_private_key",
    "recover_address",
    "sign_digest",
    "SigningSession",
]
