"""Central registry for tool discovery and dispatch.

The registry provides:
- Tool registration and lookup by name (duplicates are fatal)
- Descriptor listing for protocol clients
- Category grouping
- Dispatch: lookup, validate, execute

Dispatch is error-transparent. An unknown tool raises ToolNotFoundError,
and anything raised by validation or the tool itself reaches the caller
unmodified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel

from fulfillment_mcp.foundation.core import BaseTool, ToolDescriptor
from fulfillment_mcp.foundation.errors import OperationResult, ToolNotFoundError

logger = logging.getLogger("fulfillment_mcp.registry")

CATEGORY_ORDER: tuple[str, ...] = (
    "Fulfillment Management",
    "Query Operations",
    "Inventory Operations",
    "Other",
)


class DuplicateToolError(ValueError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' is already registered")
        self.tool_name = name


class ToolRegistry:
    """Maps tool names to tools and dispatches calls.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(GetOrdersTool(orchestrator))
        >>> result = await registry.execute("get-orders", {"statuses": ["open"]})
    """

    __slots__ = ("_tools",)

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool[BaseModel]] = {}

    def register(self, tool: BaseTool[BaseModel]) -> None:
        """Register a tool; raises DuplicateToolError if the name is taken."""
        name = tool.name
        if name in self._tools:
            raise DuplicateToolError(name)
        self._tools[name] = tool
        logger.debug(f"Registered tool: {name}")

    def register_all(self, *tools: BaseTool[BaseModel]) -> None:
        """Register several tools; all names are checked before any is added."""
        seen: set[str] = set()
        for tool in tools:
            if tool.name in self._tools or tool.name in seen:
                raise DuplicateToolError(tool.name)
            seen.add(tool.name)
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> BaseTool[BaseModel] | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> list[str]:
        return list(self._tools)

    def __getitem__(self, name: str) -> BaseTool[BaseModel]:
        return self._tools[name]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[BaseTool[BaseModel]]:
        return iter(self._tools.values())

    # ─────────────────────────────────────────────────────────────────
    # Discovery
    # ─────────────────────────────────────────────────────────────────

    def list(self) -> list[ToolDescriptor]:
        """Descriptors for every registered tool, in registration order."""
        return [tool.descriptor() for tool in self._tools.values()]

    def describe(self, name: str) -> ToolDescriptor:
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool.descriptor()

    def by_category(self) -> dict[str, list[str]]:
        """Tool names grouped by category; empty groups are omitted."""
        groups: dict[str, list[str]] = {c: [] for c in CATEGORY_ORDER}
        for tool in self._tools.values():
            groups.setdefault(tool.category if tool.category in groups else "Other", []).append(tool.name)
        return {c: names for c, names in groups.items() if names}

    # ─────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────

    async def execute(self, name: str, params: dict[str, Any] | None = None) -> OperationResult:
        """Look up, validate and run a tool.

        Raises:
            ToolNotFoundError: No tool named `name`
            ValidationError: `params` failed the tool's schema
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        validated = tool.validate_input(params if params is not None else {})
        return await tool.execute(validated)

    def clear(self) -> None:
        self._tools.clear()
