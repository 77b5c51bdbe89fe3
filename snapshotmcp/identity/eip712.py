"""
EIP-712 Typed Data Signing

Implements EIP-712 for signing structured data, used by the Snapshot
sequencer for proposals, votes and follows.

Reference: https://eips.ethereum.org/EIPS/eip-712
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from snapshotmcp.identity.evm import EvmIdentity, _keccak256, sign_digest


@dataclass
class TypedDataField:
    """EIP-712 type field definition"""
    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


@dataclass
class EIP712Domain:
    """EIP-712 domain separator; only the members that are set take part."""
    name: str
    version: str
    chain_id: Optional[int] = None
    verifying_contract: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "version": self.version}
        if self.chain_id is not None:
            result["chainId"] = self.chain_id
        if self.verifying_contract is not None:
            result["verifyingContract"] = self.verifying_contract
        return result

    @property
    def fields(self) -> List[TypedDataField]:
        fields = [
            TypedDataField("name", "string"),
            TypedDataField("version", "string"),
        ]
        if self.chain_id is not None:
            fields.append(TypedDataField("chainId", "uint256"))
        if self.verifying_contract is not None:
            fields.append(TypedDataField("verifyingContract", "address"))
        return fields


class EIP712Signer:
    """EIP-712 typed data signing implementation"""

    EIP712_DOMAIN_PREFIX = b"\x19\x01"

    @staticmethod
    def encode_type(primary_type: str, types: Dict[str, List[TypedDataField]]) -> str:
        """
        Encode type string for hashing.
        Format: Primary(type1 field1,...) followed by referenced types sorted by name.
        """
        deps = sorted(EIP712Signer._get_dependencies(primary_type, types) - {primary_type})
        result = []
        for type_name in [primary_type] + deps:
            field_strs = [f"{f.type} {f.name}" for f in types[type_name]]
            result.append(f"{type_name}({','.join(field_strs)})")
        return "".join(result)

    @staticmethod
    def _get_dependencies(
        primary_type: str,
        types: Dict[str, List[TypedDataField]],
        found: Optional[set] = None,
    ) -> set:
        """Collect the primary type and every struct type it references"""
        if found is None:
            found = set()
        base_type = primary_type[:-2] if primary_type.endswith("[]") else primary_type
        if base_type in found or base_type not in types:
            return found
        found.add(base_type)
        for field in types[base_type]:
            EIP712Signer._get_dependencies(field.type, types, found)
        return found

    @staticmethod
    def type_hash(primary_type: str, types: Dict[str, List[TypedDataField]]) -> bytes:
        """Compute keccak256 hash of type string"""
        encoded = EIP712Signer.encode_type(primary_type, types)
        return _keccak256(encoded.encode("utf-8"))

    @staticmethod
    def hash_struct(
        primary_type: str,
        types: Dict[str, List[TypedDataField]],
        value: Dict[str, Any],
    ) -> bytes:
        """Hash a struct according to EIP-712"""
        encoded = EIP712Signer._encode_data(primary_type, types, value)
        return _keccak256(encoded)

    @staticmethod
    def _encode_data(
        primary_type: str,
        types: Dict[str, List[TypedDataField]],
        value: Dict[str, Any],
    ) -> bytes:
        """Encode struct data for hashing"""
        if primary_type not in types:
            raise ValueError(f"Type {primary_type} not found in types")

        encoded_types: List[bytes] = [EIP712Signer.type_hash(primary_type, types)]
        for field in types[primary_type]:
            encoded_types.append(
                EIP712Signer._encode_field(field.type, value.get(field.name), types)
            )
        return b"".join(encoded_types)

    @staticmethod
    def _encode_field(
        field_type: str,
        value: Any,
        types: Dict[str, List[TypedDataField]],
    ) -> bytes:
        """Encode a single field value"""
        if field_type.endswith("[]"):
            item_type = field_type[:-2]
            if value is None:
                value = []
            elif not isinstance(value, list):
                value = [value]
            encoded_items = [
                EIP712Signer._encode_field(item_type, item, types)
                for item in value
            ]
            return _keccak256(b"".join(encoded_items))

        if field_type in types:
            if value is None:
                return b"\x00" * 32
            return EIP712Signer.hash_struct(field_type, types, value)

        if value is None:
            return b"\x00" * 32

        if field_type == "string":
            if isinstance(value, str):
                return _keccak256(value.encode("utf-8"))
            return _keccak256(value)

        if field_type == "bytes":
            if isinstance(value, str):
                if value.startswith("0x"):
                    value = bytes.fromhex(value[2:])
                else:
                    value = value.encode("utf-8")
            return _keccak256(value)

        if field_type == "bool":
            return (1 if value else 0).to_bytes(32, "big")

        if field_type == "address":
            if isinstance(value, str):
                if value.startswith("0x"):
                    value = value[2:]
                return bytes.fromhex(value.zfill(64))
            return value

        if field_type.startswith("uint"):
            if isinstance(value, str):
                value = int(value[2:], 16) if value.startswith("0x") else int(value)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Invalid {field_type} value: {value!r}")
            if value < 0:
                raise ValueError(f"Invalid {field_type} value: {value!r}")
            return value.to_bytes(32, "big")

        if field_type.startswith("int"):
            if isinstance(value, str):
                value = int(value[2:], 16) if value.startswith("0x") else int(value)
            if value < 0:
                value = value + (1 << 256)
            return value.to_bytes(32, "big")

        if field_type.startswith("bytes"):
            if isinstance(value, str):
                if value.startswith("0x"):
                    value = bytes.fromhex(value[2:])
                else:
                    value = value.encode("utf-8")
            return value.ljust(32, b"\x00")[:32]

        raise ValueError(f"Unsupported field type: {field_type}")

    @staticmethod
    def hash_domain(domain: EIP712Domain) -> bytes:
        """Hash the domain separator"""
        types: Dict[str, List[TypedDataField]] = {
            "EIP712Domain": domain.fields
        }
        return EIP712Signer.hash_struct("EIP712Domain", types, domain.to_dict())

    @staticmethod
    def digest(
        domain: EIP712Domain,
        types: Dict[str, List[TypedDataField]],
        primary_type: str,
        message: Dict[str, Any],
    ) -> bytes:
        """keccak256(0x1901 || domainSeparator || hashStruct(message))"""
        domain_hash = EIP712Signer.hash_domain(domain)
        message_hash = EIP712Signer.hash_struct(primary_type, types, message)
        return _keccak256(EIP712Signer.EIP712_DOMAIN_PREFIX + domain_hash + message_hash)

    @staticmethod
    def sign_typed_data(
        identity: EvmIdentity,
        domain: EIP712Domain,
        types: Dict[str, List[TypedDataField]],
        primary_type: str,
        message: Dict[str, Any],
    ) -> str:
        """
        Sign EIP-712 typed data.

        Args:
            identity: EVM identity with private key
            domain: EIP-712 domain separator
            types: Type definitions
            primary_type: The primary type being signed
            message: The message data

        Returns:
            65-byte signature as hex string (0x + r + s + v)
        """
        to_sign = EIP712Signer.digest(domain, types, primary_type, message)
        r, s, v = sign_digest(identity.private_key_hex, to_sign)
        return f"0x{r:064x}{s:064x}{v:02x}"

    @staticmethod
    def to_typed_data_json(
        domain: EIP712Domain,
        types: Dict[str, List[TypedDataField]],
        message: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Typed data in the shape the Snapshot sequencer expects: the
        EIP712Domain type is implied and therefore omitted from `types`.
        """
        return {
            "domain": domain.to_dict(),
            "types": {
                name: [f.to_dict() for f in fields]
                for name, fields in types.items()
            },
            "message": message,
        }


SNAPSHOT_DOMAIN = EIP712Domain(name="snapshot", version="0.1.4")

PROPOSAL_TYPES: Dict[str, List[TypedDataField]] = {
    "Proposal": [
        TypedDataField("from", "address"),
        TypedDataField("space", "string"),
        TypedDataField("timestamp", "uint64"),
        TypedDataField("type", "string"),
        TypedDataField("title", "string"),
        TypedDataField("body", "string"),
        TypedDataField("discussion", "string"),
        TypedDataField("choices", "string[]"),
        TypedDataField("start", "uint64"),
        TypedDataField("end", "uint64"),
        TypedDataField("snapshot", "uint64"),
        TypedDataField("plugins", "string"),
        TypedDataField("app", "string"),
    ]
}

FOLLOW_TYPES: Dict[str, List[TypedDataField]] = {
    "Follow": [
        TypedDataField("from", "address"),
        TypedDataField("space", "string"),
        TypedDataField("timestamp", "uint64"),
    ]
}

UNFOLLOW_TYPES: Dict[str, List[TypedDataField]] = {
    "Unfollow": [
        TypedDataField("from", "address"),
        TypedDataField("space", "string"),
        TypedDataField("timestamp", "uint64"),
    ]
}


def _is_hex_proposal_id(proposal: Any) -> bool:
    if not isinstance(proposal, str) or not proposal.startswith("0x") or len(proposal) != 66:
        return False
    try:
        bytes.fromhex(proposal[2:])
    except ValueError:
        return False
    return True


def vote_types(message: Dict[str, Any]) -> Dict[str, List[TypedDataField]]:
    """
    Vote type definition matching the message actually being signed.

    Hex proposal ids are bytes32, IPFS ids are strings; list choices
    (approval, ranked-choice) are uint32[]; `reason` is only declared when
    the message carries one.
    """
    fields = [
        TypedDataField("from", "address"),
        TypedDataField("space", "string"),
        TypedDataField("timestamp", "uint64"),
        TypedDataField("proposal", "bytes32" if _is_hex_proposal_id(message.get("proposal")) else "string"),
        TypedDataField("choice", "uint32[]" if isinstance(message.get("choice"), list) else "uint32"),
    ]
    if "reason" in message:
        fields.append(TypedDataField("reason", "string"))
    fields.append(TypedDataField("app", "string"))
    fields.append(TypedDataField("metadata", "string"))
    return {"Vote": fields}
