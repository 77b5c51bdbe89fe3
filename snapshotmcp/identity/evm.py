"""EVM identity generation and recoverable signing."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field

from Crypto.Hash import keccak
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, utils
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

SECP256K1_N = int(
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141",
    16,
)
SECP256K1_HALF_N = SECP256K1_N // 2
SECP256K1_P = int(
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F",
    16,
)
SECP256K1_G = (
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)

_Point = tuple[int, int] | None


@dataclass
class EvmIdentity:
    private_key_hex: str = field(repr=False)
    address: str
    public_key_hex: str


def _normalize_key_hex(value: str) -> str:
    if not isinstance(value, str):
        raise ValueError("Private key must be a hex string")
    key = value.strip()
    if key.startswith(("0x", "0X")):
        key = key[2:]
    if len(key) != 64:
        raise ValueError("Invalid private key length, expected 32-byte hex")
    try:
        key_int = int(key, 16)
    except ValueError:
        raise ValueError("Invalid private key, expected hex characters only") from None
    if not (0 < key_int < SECP256K1_N):
        raise ValueError("Invalid private key range for secp256k1")
    return key.lower()


def _keccak256(data: bytes) -> bytes:
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()


def _private_key_from_hex(private_key_hex: str) -> ec.EllipticCurvePrivateKey:
    key_int = int(_normalize_key_hex(private_key_hex), 16)
    return ec.derive_private_key(key_int, ec.SECP256K1())


def _uncompressed_public_key(private_key_hex: str) -> bytes:
    public_key = _private_key_from_hex(private_key_hex).public_key()
    return public_key.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)


def _address_from_public_bytes(uncompressed: bytes) -> str:
    # Ethereum address is last 20 bytes of keccak(pubkey_without_prefix_0x04)
    return f"0x{_keccak256(uncompressed[1:])[-20:].hex()}"


def _generate_private_key_hex() -> str:
    while True:
        raw = secrets.token_bytes(32)
        key_int = int.from_bytes(raw, "big")
        if 0 < key_int < SECP256K1_N:
            return raw.hex()


def identity_from_private_key(private_key_hex: str) -> EvmIdentity:
    key = _normalize_key_hex(private_key_hex)
    uncompressed = _uncompressed_public_key(key)
    return EvmIdentity(
        private_key_hex=key,
        address=_address_from_public_bytes(uncompressed),
        public_key_hex=f"0x{uncompressed.hex()}",
    )


def generate_identity() -> EvmIdentity:
    """Create a fresh in-memory identity."""
    return identity_from_private_key(_generate_private_key_hex())


# --- secp256k1 point arithmetic, only needed to pick the recovery id ---

def _point_add(a: _Point, b: _Point) -> _Point:
    if a is None:
        return b
    if b is None:
        return a
    p = SECP256K1_P
    if a[0] == b[0] and (a[1] + b[1]) % p == 0:
        return None
    if a == b:
        slope = (3 * a[0] * a[0]) * pow(2 * a[1], -1, p) % p
    else:
        slope = (b[1] - a[1]) * pow(b[0] - a[0], -1, p) % p
    x = (slope * slope - a[0] - b[0]) % p
    y = (slope * (a[0] - x) - a[1]) % p
    return x, y


def _point_mul(k: int, point: _Point) -> _Point:
    result: _Point = None
    addend = point
    while k:
        if k & 1:
            result = _point_add(result, addend)
        addend = _point_add(addend, addend)
        k >>= 1
    return result


def _recover_point(digest: bytes, r: int, s: int, recovery_id: int) -> _Point:
    p = SECP256K1_P
    x = r
    alpha = (pow(x, 3, p) + 7) % p
    beta = pow(alpha, (p + 1) // 4, p)
    if (beta * beta) % p != alpha:
        return None
    y = beta if beta % 2 == recovery_id % 2 else p - beta
    z = int.from_bytes(digest, "big")
    r_inv = pow(r, -1, SECP256K1_N)
    sr = _point_mul(s, (x, y))
    zg = _point_mul((-z) % SECP256K1_N, SECP256K1_G)
    return _point_mul(r_inv, _point_add(sr, zg))


def sign_digest(private_key_hex: str, digest: bytes) -> tuple[int, int, int]:
    """
    Sign a 32-byte digest and return (r, s, v) with low-s and v in {27, 28}.
    """
    key = _normalize_key_hex(private_key_hex)
    private_key = _private_key_from_hex(key)
    signature_der = private_key.sign(digest, ec.ECDSA(utils.Prehashed(hashes.SHA256())))
    r, s = utils.decode_dss_signature(signature_der)
    if s > SECP256K1_HALF_N:
        s = SECP256K1_N - s

    uncompressed = _uncompressed_public_key(key)
    expected = (int.from_bytes(uncompressed[1:33], "big"), int.from_bytes(uncompressed[33:], "big"))
    for recovery_id in (0, 1):
        if _recover_point(digest, r, s, recovery_id) == expected:
            return r, s, 27 + recovery_id
    raise ValueError("Could not determine signature recovery id")


def recover_address(digest: bytes, signature_hex: str) -> str:
    """Recover the signer address from a 65-byte r||s||v signature."""
    sig = signature_hex[2:] if signature_hex.startswith("0x") else signature_hex
    if len(sig) != 130:
        raise ValueError("Signature must be 65 bytes")
    r = int(sig[:64], 16)
    s = int(sig[64:128], 16)
    v = int(sig[128:130], 16)
    point = _recover_point(digest, r, s, v - 27)
    if point is None:
        raise ValueError("Signature does not recover to a curve point")
    uncompressed = b"\x04" + point[0].to_bytes(32, "big") + point[1].to_bytes(32, "big")
    return _address_from_public_bytes(uncompressed)
