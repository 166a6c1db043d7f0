"""The contract every fulfillment backend implements.

An adapter exposes one coroutine per domain operation. Each returns an
OperationResult, or raises AdapterError (or a connectivity failure) when
the backend cannot satisfy the call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from fulfillment_mcp.runtime.health import CheckStatus, HealthCheck, HealthState, HealthStatus

if TYPE_CHECKING:
    from fulfillment_mcp.foundation.errors import OperationResult
    from fulfillment_mcp.schemas import (
        CancelOrderInput,
        CreateReturnInput,
        CreateSalesOrderInput,
        FulfillOrderInput,
        GetCustomersInput,
        GetFulfillmentsInput,
        GetInventoryInput,
        GetOrdersInput,
        GetProductsInput,
        GetProductVariantsInput,
        GetReturnsInput,
        UpdateOrderInput,
    )

OPERATIONS: tuple[str, ...] = (
    "create_sales_order",
    "cancel_order",
    "update_order",
    "fulfill_order",
    "create_return",
    "get_orders",
    "get_inventory",
    "get_products",
    "get_product_variants",
    "get_customers",
    "get_fulfillments",
    "get_returns",
)

LIFECYCLE: tuple[str, ...] = ("connect", "disconnect", "health_check")


class AdapterCapabilities(BaseModel):
    """What a backend supports, reported to clients on request."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = "0.0.0"
    operations: list[str] = Field(default_factory=lambda: list(OPERATIONS))
    supports_partial_fulfillment: bool = True
    supports_partial_cancellation: bool = True
    extra: dict[str, Any] = Field(default_factory=dict)


class FulfillmentAdapter(ABC):
    """Base class for adapters.

    Subclasses receive their `options` mapping from configuration.
    """

    name: str = "adapter"
    version: str = "0.0.0"

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self.options: dict[str, Any] = dict(options or {})

    # Lifecycle

    @abstractmethod
    async def connect(self) -> None: ...

    @abstractmethod
    async def disconnect(self) -> None: ...

    @abstractmethod
    async def health_check(self) -> HealthStatus: ...

    async def get_capabilities(self) -> AdapterCapabilities:
        return AdapterCapabilities(name=self.name, version=self.version)

    # Actions

    @abstractmethod
    async def create_sales_order(self, input: CreateSalesOrderInput) -> OperationResult: ...

    @abstractmethod
    async def cancel_order(self, input: CancelOrderInput) -> OperationResult: ...

    @abstractmethod
    async def update_order(self, input: UpdateOrderInput) -> OperationResult: ...

    @abstractmethod
    async def fulfill_order(self, input: FulfillOrderInput) -> OperationResult: ...

    @abstractmethod
    async def create_return(self, input: CreateReturnInput) -> OperationResult: ...

    # Queries

    @abstractmethod
    async def get_orders(self, input: GetOrdersInput) -> OperationResult: ...

    @abstractmethod
    async def get_inventory(self, input: GetInventoryInput) -> OperationResult: ...

    @abstractmethod
    async def get_products(self, input: GetProductsInput) -> OperationResult: ...

    @abstractmethod
    async def get_product_variants(self, input: GetProductVariantsInput) -> OperationResult: ...

    @abstractmethod
    async def get_customers(self, input: GetCustomersInput) -> OperationResult: ...

    @abstractmethod
    async def get_fulfillments(self, input: GetFulfillmentsInput) -> OperationResult: ...

    @abstractmethod
    async def get_returns(self, input: GetReturnsInput) -> OperationResult: ...


def implements_contract(obj: object) -> list[str]:
    """Names of contract methods `obj` is missing (empty when complete)."""
    return [m for m in (*LIFECYCLE, *OPERATIONS) if not callable(getattr(obj, m, None))]


__all__ = [
    "AdapterCapabilities",
    "CheckStatus",
    "FulfillmentAdapter",
    "HealthCheck",
    "HealthState",
    "HealthStatus",
    "LIFECYCLE",
    "OPERATIONS",
    "implements_contract",
]
