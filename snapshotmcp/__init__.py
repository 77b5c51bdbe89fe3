"""
snapshot-mcp - MCP gateway for the Snapshot governance hub
"""

__version__ = "1.0.0"
__logo__ = "⚡"
