"""JSON-RPC 2.0 request/response envelopes."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from snapshotmcp.utils.exceptions import InvalidRequestError, classify_exception, render_error

JSONRPC_VERSION = "2.0"
INTERNAL_ERROR = -32603


class RpcRequest(BaseModel):
    """Decoded inbound envelope; immutable once built."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    method: str
    params: Optional[dict[str, Any]] = None

    @classmethod
    def decode(cls, payload: Any) -> "RpcRequest":
        if not isinstance(payload, dict):
            raise InvalidRequestError("Invalid request: expected a JSON object")
        if "method" not in payload:
            raise InvalidRequestError("Invalid request: missing method")
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "request"
            raise InvalidRequestError(f"Invalid request: {location}: {first.get('msg')}") from e


def peek_id(payload: Any) -> Any:
    """Best-effort request id for error replies to undecodable envelopes."""
    return payload.get("id") if isinstance(payload, dict) else None


def success_response(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, exc: BaseException) -> dict[str, Any]:
    code, category, _ = classify_exception(exc)
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {
            "code": INTERNAL_ERROR,
            "message": render_error(exc),
            "data": {"error_code": code, "category": category.value},
        },
    }
