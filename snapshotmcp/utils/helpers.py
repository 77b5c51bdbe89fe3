"""Utility functions for snapshot-mcp."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the snapshot-mcp data directory (~/.snapshot-mcp)."""
    return ensure_dir(Path.home() / ".snapshot-mcp")


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def lower_identifier(value: Any) -> Any:
    """Lower-case address-like identifiers; non-strings pass through."""
    return value.lower() if isinstance(value, str) else value
