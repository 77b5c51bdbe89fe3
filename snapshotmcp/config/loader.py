"""Configuration loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from snapshotmcp.config.schema import Config

# Legacy variable names honoured by the original deployment scripts.
LEGACY_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PORT": ("server", "port"),
    "SNAPSHOT_HUB_URL": ("hub", "hub_url"),
}


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".snapshot-mcp" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            cfg = Config(**convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            raise ValueError(
                f"Failed to load config from {path}: {e}. "
                "Fix the file or remove it to use defaults."
            ) from e
    else:
        cfg = Config()

    _apply_legacy_env_overrides(cfg)
    return cfg


def _apply_legacy_env_overrides(cfg: Config) -> None:
    """Apply PORT / SNAPSHOT_HUB_URL on top of file and SNAPSHOT_MCP_* settings."""
    for env_name, (section_name, field_name) in LEGACY_ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is None or not raw.strip():
            continue
        section = getattr(cfg, section_name)
        current = getattr(section, field_name)
        try:
            value: Any = int(raw) if isinstance(current, int) else raw.strip()
        except ValueError:
            logger.warning("Ignoring {}={!r}: not an integer", env_name, raw)
            continue
        setattr(section, field_name, value)


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)
