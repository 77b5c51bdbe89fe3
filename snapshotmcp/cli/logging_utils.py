"""Loguru sink setup for CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from snapshotmcp.utils.helpers import ensure_dir, get_data_path

STDERR_FORMAT = (
    "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)

_SINK_IDS: dict[str, int] = {}


def configure_stderr(level: str = "INFO") -> None:
    """Replace the default sink with one on stderr; stdout stays free for the stdio transport."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=STDERR_FORMAT)


def get_log_path(name: str) -> Path:
    return get_data_path() / "logs" / f"{name}.log"


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_path = get_log_path(name)
    if name in _SINK_IDS:
        return log_path
    ensure_dir(log_path.parent)
    _SINK_IDS[name] = logger.add(
        str(log_path),
        level=level.upper(),
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    return log_path
