"""Read-only lookup tools."""

from __future__ import annotations

from typing import ClassVar

from fulfillment_mcp.foundation.core import ToolMetadata
from fulfillment_mcp.foundation.errors import OperationResult
from fulfillment_mcp.schemas import (
    GetCustomersInput,
    GetFulfillmentsInput,
    GetInventoryInput,
    GetOrdersInput,
    GetProductsInput,
    GetProductVariantsInput,
    GetReturnsInput,
)

from .base import OrchestratorTool

QUERY = "Query Operations"
INVENTORY = "Inventory Operations"


class GetOrdersTool(OrchestratorTool[GetOrdersInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-orders",
        description=(
            "Retrieves order details when you need to check order status, view line items, track fulfillment "
            "progress, or investigate customer inquiries. Accepts order IDs, external IDs, order names, or statuses."
        ),
        category=QUERY,
    )
    params_schema: ClassVar[type[GetOrdersInput]] = GetOrdersInput

    async def execute(self, params: GetOrdersInput) -> OperationResult:
        return await self.orchestrator.get_orders(params)


class GetInventoryTool(OrchestratorTool[GetInventoryInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-inventory",
        description=(
            "Retrieves real-time stock levels and availability to check if products can be fulfilled. Use when: "
            "validating order feasibility, checking stock before promising delivery, or preventing overselling. "
            "Returns available, reserved, and on-hand quantities by SKU and optional location."
        ),
        category=INVENTORY,
    )
    params_schema: ClassVar[type[GetInventoryInput]] = GetInventoryInput

    async def execute(self, params: GetInventoryInput) -> OperationResult:
        return await self.orchestrator.get_inventory(params)


class GetProductsTool(OrchestratorTool[GetProductsInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-products",
        description=(
            "Retrieves product details including descriptions, options, and attributes. Use when: adding items "
            "to orders, verifying product existence, or displaying catalogs. Searches by product ID, SKU, or name."
        ),
        category=QUERY,
    )
    params_schema: ClassVar[type[GetProductsInput]] = GetProductsInput

    async def execute(self, params: GetProductsInput) -> OperationResult:
        return await self.orchestrator.get_products(params)


class GetProductVariantsTool(OrchestratorTool[GetProductVariantsInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-product-variants",
        description=(
            "Retrieves SKU-level product variant information, including option selections, pricing, and "
            "inventory tracking flags. Supports lookups by variant ID, SKU, or parent product ID."
        ),
        category=QUERY,
    )
    params_schema: ClassVar[type[GetProductVariantsInput]] = GetProductVariantsInput

    async def execute(self, params: GetProductVariantsInput) -> OperationResult:
        return await self.orchestrator.get_product_variants(params)


class GetCustomersTool(OrchestratorTool[GetCustomersInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-customers",
        description="Get customers by their ID or email.",
        category=QUERY,
    )
    params_schema: ClassVar[type[GetCustomersInput]] = GetCustomersInput

    async def execute(self, params: GetCustomersInput) -> OperationResult:
        return await self.orchestrator.get_customers(params)


class GetFulfillmentsTool(OrchestratorTool[GetFulfillmentsInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-fulfillments",
        description=(
            "Retrieves shipping details and tracking information for customer updates or delivery verification. "
            "Use when: answering \"where is my order\" inquiries or investigating shipping issues. Searches by "
            "fulfillment ID or order ID."
        ),
        category=QUERY,
    )
    params_schema: ClassVar[type[GetFulfillmentsInput]] = GetFulfillmentsInput

    async def execute(self, params: GetFulfillmentsInput) -> OperationResult:
        return await self.orchestrator.get_fulfillments(params)


class GetReturnsTool(OrchestratorTool[GetReturnsInput]):
    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="get-returns",
        description=(
            "Retrieves return records with filtering by return ID, order ID, return number, status, or outcome. "
            "Use when: tracking return status, finding returns for specific orders, or generating return reports."
        ),
        category=QUERY,
    )
    params_schema: ClassVar[type[GetReturnsInput]] = GetReturnsInput

    async def execute(self, params: GetReturnsInput) -> OperationResult:
        return await self.orchestrator.get_returns(params)


QUERY_TOOLS: tuple[type[OrchestratorTool], ...] = (
    GetOrdersTool,
    GetCustomersTool,
    GetProductsTool,
    GetProductVariantsTool,
    GetInventoryTool,
    GetFulfillmentsTool,
    GetReturnsTool,
)
