"""Composition root for fulfillment operations.

Every domain operation goes through the same path: adapter call under the
adapter timeout budget, retried by the shared policy, timed and recorded
once, with expected business failures returned as failure results.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fulfillment_mcp.foundation.errors import DomainError, OperationResult
from fulfillment_mcp.runtime.health import HealthMonitor
from fulfillment_mcp.runtime.retry import RetryPolicy
from fulfillment_mcp.runtime.timeout import TimeoutBudgets, TimeoutGuard

from .adapter_manager import AdapterManager
from .error_handler import ErrorHandler

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fulfillment_mcp.adapters import AdapterCapabilities, FulfillmentAdapter
    from fulfillment_mcp.foundation.config import AdapterSettings, ServerSettings
    from fulfillment_mcp.runtime.health import HealthStatus
    from fulfillment_mcp.runtime.retry import RetryOptions
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

logger = logging.getLogger("fulfillment_mcp.services")

ADAPTER_COMPONENT = "adapter"


class ServiceOrchestrator:
    """Dispatches domain operations to the active adapter.

    Collaborators are injected so tests can supply a fake clock, sleep or
    adapter; `from_settings` wires the production instance.

    Example:
        >>> orchestrator = ServiceOrchestrator.from_settings(get_settings())
        >>> await orchestrator.initialize(settings.adapter)
        >>> result = await orchestrator.get_orders(GetOrdersInput(statuses=["new"]))
    """

    def __init__(
        self,
        monitor: HealthMonitor | None = None,
        timeout_guard: TimeoutGuard | None = None,
        retry_policy: RetryPolicy | None = None,
        adapter_manager: AdapterManager | None = None,
        *,
        monitoring_interval_ms: float | None = None,
    ) -> None:
        self.monitor = monitor or HealthMonitor()
        self.timeout_guard = timeout_guard or TimeoutGuard()
        self.retry_policy = retry_policy or RetryPolicy()
        self.adapter_manager = adapter_manager or AdapterManager()
        self.error_handler = ErrorHandler(self.monitor, self.retry_policy)
        self._monitoring_interval_ms = monitoring_interval_ms
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: ServerSettings) -> ServiceOrchestrator:
        monitoring = settings.monitoring
        return cls(
            HealthMonitor(monitoring.max_history_size, error_rate_threshold=monitoring.error_rate_threshold),
            TimeoutGuard(TimeoutBudgets.from_settings(settings.timeout)),
            RetryPolicy(settings.retry),
            monitoring_interval_ms=monitoring.interval_ms if monitoring.enabled else None,
        )

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, adapter_config: AdapterSettings) -> None:
        """Load and connect the adapter, then start periodic monitoring if enabled."""
        await self.adapter_manager.initialize(adapter_config)
        if self._monitoring_interval_ms is not None:
            self.monitor.start(self._monitoring_interval_ms)
        self._initialized = True
        logger.info("Service orchestrator initialized")

    async def _run(
        self,
        name: str,
        service: str,
        call: Callable[[FulfillmentAdapter], Awaitable[OperationResult]],
        retry_options: RetryOptions | None = None,
    ) -> OperationResult:
        adapter = self.adapter_manager.get_adapter()
        try:
            return await self.error_handler.execute_operation(
                name,
                lambda: self.timeout_guard.with_timeout(lambda: call(adapter), "adapter", operation=name),
                service=service,
                retry_options=retry_options,
            )
        except DomainError as e:
            return OperationResult.fail(e.error)

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    async def create_sales_order(self, input: CreateSalesOrderInput) -> OperationResult:
        return await self._run("create_sales_order", "orders", lambda a: a.create_sales_order(input))

    async def cancel_order(self, input: CancelOrderInput) -> OperationResult:
        return await self._run("cancel_order", "orders", lambda a: a.cancel_order(input))

    async def update_order(self, input: UpdateOrderInput) -> OperationResult:
        return await self._run("update_order", "orders", lambda a: a.update_order(input))

    async def fulfill_order(self, input: FulfillOrderInput) -> OperationResult:
        return await self._run("fulfill_order", "fulfillments", lambda a: a.fulfill_order(input))

    async def create_return(self, input: CreateReturnInput) -> OperationResult:
        return await self._run("create_return", "returns", lambda a: a.create_return(input))

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    async def get_orders(self, input: GetOrdersInput) -> OperationResult:
        return await self._run("get_orders", "orders", lambda a: a.get_orders(input))

    async def get_inventory(self, input: GetInventoryInput) -> OperationResult:
        return await self._run("get_inventory", "inventory", lambda a: a.get_inventory(input))

    async def get_products(self, input: GetProductsInput) -> OperationResult:
        return await self._run("get_products", "products", lambda a: a.get_products(input))

    async def get_product_variants(self, input: GetProductVariantsInput) -> OperationResult:
        return await self._run("get_product_variants", "products", lambda a: a.get_product_variants(input))

    async def get_customers(self, input: GetCustomersInput) -> OperationResult:
        return await self._run("get_customers", "customers", lambda a: a.get_customers(input))

    async def get_fulfillments(self, input: GetFulfillmentsInput) -> OperationResult:
        return await self._run("get_fulfillments", "fulfillments", lambda a: a.get_fulfillments(input))

    async def get_returns(self, input: GetReturnsInput) -> OperationResult:
        return await self._run("get_returns", "returns", lambda a: a.get_returns(input))

    # ─────────────────────────────────────────────────────────────────
    # Health and lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def check_health(self) -> HealthStatus:
        """Post the adapter's health as a component check and return the system verdict."""
        adapter_health = await self.adapter_manager.check_health()
        self.monitor.record_health_check(ADAPTER_COMPONENT, adapter_health)
        return self.monitor.get_system_health()

    def get_metrics(self) -> dict[str, Any]:
        return self.monitor.export_metrics()

    async def get_capabilities(self) -> AdapterCapabilities:
        return await self.adapter_manager.get_capabilities()

    async def cleanup(self) -> None:
        """Disconnect the adapter and stop monitoring. Idempotent."""
        try:
            await self.adapter_manager.cleanup()
        finally:
            await self.monitor.stop()
            self._initialized = False
        logger.info("Service orchestrator cleaned up")
