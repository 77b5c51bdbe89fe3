"""Operation catalog: ordered registry of the gateway's tools."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from snapshotmcp.tools.base import Operation


class ToolRegistry:
    """
    Registry of catalog operations.

    Insertion order is the tools/list order. Entries are fixed once the
    process has started; registering a duplicate name is an error.
    """

    def __init__(self, operations: Iterable[Operation] = ()):
        self._tools: dict[str, Operation] = {}
        for op in operations:
            self.register(op)

    def register(self, op: Operation) -> None:
        """Register an operation."""
        if op.name in self._tools:
            raise ValueError(f"Tool already registered: {op.name}")
        self._tools[op.name] = op

    def get(self, name: str) -> Operation | None:
        """Get an operation by name."""
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def get_definitions(self) -> list[dict[str, Any]]:
        """Descriptors for every operation, in catalog order."""
        return [op.descriptor() for op in self._tools.values()]

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
