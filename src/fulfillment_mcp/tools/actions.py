"""Tools that change order, fulfillment and return state."""

from __future__ import annotations

from typing import ClassVar

from fulfillment_mcp.foundation.core import ToolMetadata
from fulfillment_mcp.foundation.errors import OperationResult
from fulfillment_mcp.schemas import (
    CancelOrderInput,
    CreateReturnInput,
    CreateSalesOrderInput,
    FulfillOrderInput,
    UpdateOrderInput,
)

from .base import OrchestratorTool

CATEGORY = "Fulfillment Management"


class CreateSalesOrderTool(OrchestratorTool[CreateSalesOrderInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="create-sales-order",
        description=(
            "Creates a new order when a customer completes checkout or when importing orders from external "
            "systems. Use when: processing new purchases, migrating orders from other platforms, or creating "
            "manual orders. Required: line items with SKUs and quantities."
        ),
        category=CATEGORY,
    )
    params_schema: ClassVar[type[CreateSalesOrderInput]] = CreateSalesOrderInput

    async def execute(self, params: CreateSalesOrderInput) -> OperationResult:
        return await self.orchestrator.create_sales_order(params)


class CancelOrderTool(OrchestratorTool[CancelOrderInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="cancel-order",
        description=(
            "Cancels an order to stop fulfillment and release reserved inventory. Use when: customer requests "
            "cancellation, payment fails, fraud is detected, or items become unavailable. Only works for orders "
            "not yet shipped."
        ),
        category=CATEGORY,
    )
    params_schema: ClassVar[type[CancelOrderInput]] = CancelOrderInput

    async def execute(self, params: CancelOrderInput) -> OperationResult:
        return await self.orchestrator.cancel_order(params)


class UpdateOrderTool(OrchestratorTool[UpdateOrderInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="update-order",
        description=(
            "Modifies order details when corrections or changes are needed before fulfillment. Use when: "
            "correcting addresses, updating quantities, changing shipping methods, or adding notes. Shipped, "
            "delivered and cancelled orders cannot be edited; check status first with get-orders."
        ),
        category=CATEGORY,
    )
    params_schema: ClassVar[type[UpdateOrderInput]] = UpdateOrderInput

    async def execute(self, params: UpdateOrderInput) -> OperationResult:
        return await self.orchestrator.update_order(params)


class FulfillOrderTool(OrchestratorTool[FulfillOrderInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="fulfill-order",
        description=(
            "Marks an order as shipped and creates tracking records when items leave the warehouse. Use when: "
            "warehouse confirms dispatch, carrier picks up package, or dropshipper provides tracking. Required: "
            "order ID, shipping info, shipped items, and shipping address."
        ),
        category=CATEGORY,
    )
    params_schema: ClassVar[type[FulfillOrderInput]] = FulfillOrderInput

    async def execute(self, params: FulfillOrderInput) -> OperationResult:
        return await self.orchestrator.fulfill_order(params)


class CreateReturnTool(OrchestratorTool[CreateReturnInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="create-return",
        description=(
            "Creates a new return for items from an existing order. Use when: processing customer return "
            "requests, initiating RMA workflows, or creating exchange transactions. Required: order ID, return "
            "line items with SKUs and quantities, and return outcome (refund/exchange)."
        ),
        category=CATEGORY,
    )
    params_schema: ClassVar[type[CreateReturnInput]] = CreateReturnInput

    async def execute(self, params: CreateReturnInput) -> OperationResult:
        return await self.orchestrator.create_return(params)


ACTION_TOOLS: tuple[type[OrchestratorTool], ...] = (
    CreateSalesOrderTool,
    CancelOrderTool,
    UpdateOrderTool,
    FulfillOrderTool,
    CreateReturnTool,
)
