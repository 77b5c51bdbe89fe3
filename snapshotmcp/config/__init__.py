"""Configuration module for snapshot-mcp."""

from snapshotmcp.config.loader import get_config_path, load_config
from snapshotmcp.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
