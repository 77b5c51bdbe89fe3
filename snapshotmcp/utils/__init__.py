"""Utility functions for snapshot-mcp."""

from snapshotmcp.utils.helpers import ensure_dir, get_data_path, lower_identifier, utc_now_iso
from snapshotmcp.utils.exceptions import (
    ActionError,
    ErrorCategory,
    GatewayError,
    InvalidRequestError,
    NoIdentityError,
    RateLimitExceeded,
    UnknownMethodError,
    UnknownToolError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
    classify_exception,
    render_error,
    sanitize_error_message,
)

__all__ = [
    "ensure_dir",
    "get_data_path",
    "lower_identifier",
    "utc_now_iso",
    "ActionError",
    "ErrorCategory",
    "GatewayError",
    "InvalidRequestError",
    "NoIdentityError",
    "RateLimitExceeded",
    "UnknownMethodError",
    "UnknownToolError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "ValidationError",
    "classify_exception",
    "render_error",
    "sanitize_error_message",
]
