"""
Exception hierarchy and error handling utilities for snapshot-mcp.

Provides:
- Custom exception classes with error codes
- Error categorization (validation, upstream, identity, protocol, ...)
- Cause chains rendered to text only at the outermost boundary
- Safe error message formatting for logs (no key material leak)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any

import httpx


class ErrorCategory(Enum):
    """Error categories for classification."""
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    UPSTREAM = "upstream"
    TIMEOUT = "timeout"
    IDENTITY = "identity"
    PROTOCOL = "protocol"
    RETRYABLE = "retryable"
    FATAL = "fatal"


class GatewayError(Exception):
    """Base exception for all snapshot-mcp errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def chain(self) -> list[dict[str, Any]]:
        """Ordered cause chain, outermost first."""
        records: list[dict[str, Any]] = []
        seen: set[int] = set()
        current: BaseException | None = self
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            if isinstance(current, GatewayError):
                records.append({"code": current.code, "message": current.message})
            else:
                code, _, _ = classify_exception(current)
                records.append({"code": code, "message": str(current) or type(current).__name__})
            current = current.__cause__
        return records

    def render(self) -> str:
        """Join the cause chain into one human-readable line."""
        return ": ".join(record["message"] for record in self.chain())

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.render(),
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(GatewayError):
    """Input validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class RateLimitExceeded(GatewayError):
    """Local self-throttle toward an upstream service tripped."""

    def __init__(self, service: str, limit: int, window_seconds: float, retry_after: float | None = None):
        super().__init__(
            "Rate limit exceeded. Please wait before making more requests.",
            code="RATE_LIMIT",
            category=ErrorCategory.RATE_LIMIT,
            details={
                "service": service,
                "limit": limit,
                "window_seconds": window_seconds,
                "retry_after": retry_after,
            },
        )


class UpstreamError(GatewayError):
    """Upstream returned a non-2xx status or a non-empty error list."""

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        errors: Any = None,
    ):
        super().__init__(
            message,
            code="UPSTREAM_ERROR",
            category=ErrorCategory.RETRYABLE if status_code and status_code >= 500 else ErrorCategory.UPSTREAM,
            details={"service": service, "status_code": status_code, "errors": errors},
        )
        self.status_code = status_code
        self.errors = errors


class UpstreamTimeoutError(GatewayError):
    """Upstream call exceeded its deadline."""

    def __init__(self, operation: str, timeout_seconds: float | None):
        super().__init__(
            f"Operation '{operation}' timed out after {timeout_seconds}s",
            code="TIMEOUT",
            category=ErrorCategory.TIMEOUT,
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )


class NoIdentityError(GatewayError):
    """Action attempted before any signing identity was created or imported."""

    def __init__(self) -> None:
        super().__init__(
            "No signing identity configured. Call create_wallet or import_wallet first.",
            code="NO_IDENTITY",
            category=ErrorCategory.IDENTITY,
        )


class ActionError(GatewayError):
    """Signing or submission of a governance action failed."""

    def __init__(self, operation: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Failed to {operation}",
            code="ACTION_FAILED",
            category=ErrorCategory.UPSTREAM,
            details={"operation": operation, **(details or {})},
        )


class UnknownMethodError(GatewayError):
    """Protocol method not recognised by the dispatcher."""

    def __init__(self, method: Any):
        super().__init__(
            f"Unknown method: {method}",
            code="UNKNOWN_METHOD",
            category=ErrorCategory.PROTOCOL,
            details={"method": method},
        )


class UnknownToolError(GatewayError):
    """tools/call named a tool that is not in the catalog."""

    def __init__(self, name: Any):
        super().__init__(
            f"Unknown tool: {name}",
            code="UNKNOWN_TOOL",
            category=ErrorCategory.PROTOCOL,
            details={"tool": name},
        )


class InvalidRequestError(GatewayError):
    """Envelope could not be decoded into a request."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_REQUEST", category=ErrorCategory.PROTOCOL)


_SENSITIVE_PATTERNS = [
    re.compile(r"(private[_ -]?key|secret|password|token)[=:]\s*['\"]?([^\s'\",}]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages before logging."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: BaseException) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).
    """
    if isinstance(exc, GatewayError):
        return exc.code, exc.category, exc.category in (ErrorCategory.RETRYABLE, ErrorCategory.RATE_LIMIT)

    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 429:
            return "RATE_LIMIT", ErrorCategory.RATE_LIMIT, True
        if status >= 500:
            return "UPSTREAM_ERROR", ErrorCategory.RETRYABLE, True
        return "UPSTREAM_ERROR", ErrorCategory.UPSTREAM, False

    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION, False

    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if isinstance(exc, KeyError):
        return "MISSING_KEY", ErrorCategory.VALIDATION, False

    if isinstance(exc, TypeError):
        return "TYPE_ERROR", ErrorCategory.VALIDATION, False

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False


def render_error(exc: BaseException) -> str:
    """Render any exception to the text shown to callers."""
    if isinstance(exc, GatewayError):
        return exc.render()
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)) and not str(exc):
        return "Operation timed out"
    return str(exc) or type(exc).__name__
