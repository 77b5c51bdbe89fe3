"""Operation catalog."""

from snapshotmcp.tools.action_tools import ACTION_OPERATIONS
from snapshotmcp.tools.base import Operation, error_result, result_boundary, success_result
from snapshotmcp.tools.identity_tools import IDENTITY_OPERATIONS
from snapshotmcp.tools.read_tools import READ_OPERATIONS
from snapshotmcp.tools.registry import ToolRegistry
from snapshotmcp.tools.validation import validate_arguments


def build_catalog() -> ToolRegistry:
    """The fourteen operations in tools/list order."""
    return ToolRegistry([*READ_OPERATIONS, *IDENTITY_OPERATIONS, *ACTION_OPERATIONS])


__all__ = [
    "Operation",
    "ToolRegistry",
    "build_catalog",
    "error_result",
    "result_boundary",
    "success_result",
    "validate_arguments",
]
