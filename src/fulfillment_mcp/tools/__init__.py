"""Fulfillment tools exposed at the protocol boundary.

Example:
    >>> registry = ToolRegistry()
    >>> register_tools(registry, orchestrator)
    >>> registry.names()[:2]
    ['create-sales-order', 'cancel-order']
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .actions import (
    ACTION_TOOLS,
    CancelOrderTool,
    CreateReturnTool,
    CreateSalesOrderTool,
    FulfillOrderTool,
    UpdateOrderTool,
)
from .base import OrchestratorTool
from .queries import (
    QUERY_TOOLS,
    GetCustomersTool,
    GetFulfillmentsTool,
    GetInventoryTool,
    GetOrdersTool,
    GetProductsTool,
    GetProductVariantsTool,
    GetReturnsTool,
)

if TYPE_CHECKING:
    from fulfillment_mcp.foundation.registry import ToolRegistry
    from fulfillment_mcp.services import ServiceOrchestrator

ALL_TOOLS: tuple[type[OrchestratorTool], ...] = ACTION_TOOLS + QUERY_TOOLS


def register_tools(registry: ToolRegistry, orchestrator: ServiceOrchestrator) -> None:
    """Register every fulfillment tool bound to `orchestrator`."""
    registry.register_all(*(tool(orchestrator) for tool in ALL_TOOLS))


__all__ = [
    "ALL_TOOLS",
    "OrchestratorTool",
    "register_tools",
    # Actions
    "CreateSalesOrderTool", "CancelOrderTool", "UpdateOrderTool", "FulfillOrderTool", "CreateReturnTool",
    # Queries
    "GetOrdersTool", "GetInventoryTool", "GetProductsTool", "GetProductVariantsTool",
    "GetCustomersTool", "GetFulfillmentsTool", "GetReturnsTool",
]
