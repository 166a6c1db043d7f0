"""Mock adapter simulating a fulfillment backend in memory.

Useful for development and tests: configurable latency, per-operation
error rates, and a queue of injected failures for deterministic retry
scenarios.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import defaultdict, deque
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fulfillment_mcp.adapters.base import AdapterCapabilities, FulfillmentAdapter
from fulfillment_mcp.foundation.errors import AdapterError, OperationResult
from fulfillment_mcp.runtime.health import CheckStatus, HealthCheck, HealthState, HealthStatus
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
    TemporalPagination,
    UpdateOrderInput,
)

from .data import MockDataStore, Record, now_iso

logger = logging.getLogger("fulfillment_mcp.adapters.mock")

TAX_RATE = 0.08
FREE_SHIPPING_THRESHOLD = 100.0
FLAT_SHIPPING = 10.0
_UNCANCELLABLE = frozenset({"shipped", "delivered"})


class MockAdapterOptions(BaseModel):
    """Behavior knobs, read from the adapter `options` mapping."""

    model_config = ConfigDict(extra="ignore")

    min_latency_ms: float = Field(default=0, ge=0)
    max_latency_ms: float = Field(default=0, ge=0)
    fixed_latency_ms: float | None = Field(default=None, ge=0)
    error_rate: float = Field(default=0.0, ge=0, le=1)
    operation_errors: dict[str, float] = Field(default_factory=dict)
    data_size: int = Field(default=10, ge=0)
    seed: int = 7


class MockAdapter(FulfillmentAdapter):
    """In-memory backend implementing the full adapter contract."""

    name = "mock"
    version = "1.0.0"

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        super().__init__(options)
        self.config = MockAdapterOptions.model_validate(self.options)
        self.data = MockDataStore.seeded(self.config.data_size, self.config.seed)
        self.connected = False
        self.calls: dict[str, int] = defaultdict(int)
        self._rng = random.Random(self.config.seed)
        self._injected: dict[str, deque[BaseException]] = defaultdict(deque)

    # ─────────────────────────────────────────────────────────────────
    # Test hooks
    # ─────────────────────────────────────────────────────────────────

    def fail_next(self, operation: str, error: BaseException, times: int = 1) -> None:
        """Make the next `times` calls to `operation` raise `error`."""
        self._injected[operation].extend([error] * times)

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        await self._simulate_latency()
        if not self.connected:
            raise AdapterError("Adapter not connected", "NOT_CONNECTED")
        if queue := self._injected.get(operation):
            raise queue.popleft()
        rate = self.config.operation_errors.get(operation, self.config.error_rate)
        if rate and self._rng.random() < rate:
            raise AdapterError(f"Mock error: {operation} failed", "OPERATION_FAILED", {"retryable": True})

    async def _simulate_latency(self) -> None:
        c = self.config
        if c.fixed_latency_ms is not None:
            ms = c.fixed_latency_ms
        else:
            ms = self._rng.uniform(c.min_latency_ms, max(c.min_latency_ms, c.max_latency_ms))
        if ms:
            await asyncio.sleep(ms / 1000)

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def connect(self) -> None:
        await self._simulate_latency()
        self.connected = True
        logger.info("Mock adapter connected")

    async def disconnect(self) -> None:
        self.connected = False
        logger.info("Mock adapter disconnected")

    async def health_check(self) -> HealthStatus:
        sizes = self.data.sizes()
        return HealthStatus(
            status=HealthState.HEALTHY if self.connected else HealthState.UNHEALTHY,
            message="Connected" if self.connected else "Not connected",
            checks=[
                HealthCheck(
                    name="connection",
                    status=CheckStatus.PASS if self.connected else CheckStatus.FAIL,
                    message="Connected" if self.connected else "Not connected",
                ),
                HealthCheck(
                    name="data_store",
                    status=CheckStatus.PASS,
                    message=f"{sizes['orders']} orders, {sizes['products']} products, {sizes['variants']} variants in memory",
                ),
            ],
        )

    async def get_capabilities(self) -> AdapterCapabilities:
        return AdapterCapabilities(name=self.name, version=self.version, extra={"in_memory": True})

    # ─────────────────────────────────────────────────────────────────
    # Actions
    # ─────────────────────────────────────────────────────────────────

    async def create_sales_order(self, input: CreateSalesOrderInput) -> OperationResult:
        await self._enter("create_sales_order")
        order = input.order.to_wire()
        items = []
        for item in order.get("lineItems", []):
            unit = item.get("unitPrice", 0.0)
            items.append({
                **item,
                "id": item.get("id") or self.data.next_id("LI"),
                "unitPrice": unit,
                "totalPrice": item.get("totalPrice", unit * item["quantity"]),
            })
        subtotal = sum(i["totalPrice"] for i in items)
        tax = round(subtotal * TAX_RATE, 2)
        shipping = 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
        ts = now_iso()
        order_id = self.data.next_id("ORD")
        saved = {
            **order,
            "id": order_id,
            "status": "new",
            "currency": order.get("currency", "USD"),
            "lineItems": items,
            "subTotalPrice": subtotal,
            "orderTax": tax,
            "shippingPrice": shipping,
            "totalPrice": round(subtotal + tax + shipping, 2),
            "createdAt": ts,
            "updatedAt": ts,
            "tenantId": "mock-tenant",
        }
        self.data.orders[order_id] = saved
        logger.info(f"Order captured: {order_id} total={saved['totalPrice']}")
        return OperationResult.ok(order=saved)

    async def cancel_order(self, input: CancelOrderInput) -> OperationResult:
        await self._enter("cancel_order")
        order = self._order(input.order_id)
        status = order.get("status")
        if status == "cancelled" or status in _UNCANCELLABLE:
            raise AdapterError(
                f"Cannot cancel order {input.order_id} in status {status}",
                "INVALID_ORDER_STATE",
                {"orderId": input.order_id, "currentStatus": status, "operation": "cancel"},
            )
        order["status"] = "cancelled"
        order["updatedAt"] = now_iso()
        if input.reason:
            order["cancelReason"] = input.reason
        return OperationResult.ok(order=order)

    async def update_order(self, input: UpdateOrderInput) -> OperationResult:
        await self._enter("update_order")
        order = self._order(input.id)
        if order.get("status") in _UNCANCELLABLE | {"cancelled"}:
            raise AdapterError(
                f"Cannot update order {input.id} in status {order['status']}",
                "INVALID_ORDER_STATE",
                {"orderId": input.id, "currentStatus": order["status"], "operation": "update"},
            )
        order.update(input.updates.model_dump(mode="json", by_alias=True, exclude_unset=True))
        order["updatedAt"] = now_iso()
        return OperationResult.ok(order=order)

    async def fulfill_order(self, input: FulfillOrderInput) -> OperationResult:
        await self._enter("fulfill_order")
        order = self._order(input.order_id)
        if order.get("status") == "cancelled":
            raise AdapterError(
                f"Cannot ship order {input.order_id} in status cancelled",
                "INVALID_ORDER_STATE",
                {"orderId": input.order_id, "currentStatus": "cancelled", "operation": "ship"},
            )
        for item in input.items:
            available = sum(
                rec.get("available", 0) for (sku, _), rec in self.data.inventory.items() if sku == item.sku
            )
            if self.data.variant_by_sku(item.sku) is not None and available < item.quantity:
                raise AdapterError(
                    f"Insufficient inventory for {item.sku}: {available} available, {item.quantity} requested",
                    "INSUFFICIENT_INVENTORY",
                    {"sku": item.sku, "available": available, "requested": item.quantity},
                )
        shipped = {i.sku for i in input.items}
        ts = now_iso()
        fulfillment_id = self.data.next_id("FUL")
        info = input.shipping_info
        fulfillment = {
            "id": fulfillment_id,
            "externalId": f"FULFILL-{fulfillment_id}",
            "orderId": order["id"],
            "status": "shipped",
            "shippingAddress": input.shipping_address.to_wire(),
            "shippingCarrier": info.carrier,
            "trackingNumber": info.tracking_number,
            "lineItems": [li for li in order.get("lineItems", []) if li["sku"] in shipped],
            "createdAt": ts,
            "updatedAt": ts,
            "tenantId": "mock-tenant",
        }
        self.data.fulfillments[fulfillment_id] = fulfillment
        order["status"] = "shipped"
        order["updatedAt"] = ts
        return OperationResult.ok(fulfillment=fulfillment)

    async def create_return(self, input: CreateReturnInput) -> OperationResult:
        await self._enter("create_return")
        body = input.return_.to_wire()
        self._order(body["orderId"])
        return_id = self.data.next_id("RET")
        ts = now_iso()
        saved = {
            **body,
            "id": return_id,
            "returnNumber": body.get("returnNumber") or f"RET-{return_id.split('-')[-1]}",
            "status": body.get("status", "requested"),
            "totalQuantity": sum(li["quantityReturned"] for li in body["returnLineItems"]),
            "createdAt": ts,
            "updatedAt": ts,
            "tenantId": "mock-tenant",
        }
        self.data.returns[return_id] = saved
        return OperationResult.ok(**{"return": saved})

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    async def get_orders(self, input: GetOrdersInput) -> OperationResult:
        await self._enter("get_orders")
        rows = _match(self.data.orders.values(), id=input.ids, externalId=input.external_ids,
                      status=input.statuses, name=input.names)
        return OperationResult.ok(orders=_page(rows, input))

    async def get_inventory(self, input: GetInventoryInput) -> OperationResult:
        await self._enter("get_inventory")
        locations = set(input.location_ids or ())
        rows = [
            rec for (sku, loc), rec in self.data.inventory.items()
            if sku in input.skus and (not locations or loc in locations)
        ]
        return OperationResult.ok(inventory=rows)

    async def get_products(self, input: GetProductsInput) -> OperationResult:
        await self._enter("get_products")
        product_ids = set(input.ids or ())
        if input.skus:
            product_ids |= {v["productId"] for v in self.data.variants.values() if v["sku"] in input.skus}
        rows = _match(self.data.products.values(), id=sorted(product_ids) or None, name=input.names)
        if input.skus and not product_ids:
            rows = []
        return OperationResult.ok(products=_page(rows, input))

    async def get_product_variants(self, input: GetProductVariantsInput) -> OperationResult:
        await self._enter("get_product_variants")
        rows = _match(self.data.variants.values(), id=input.variant_ids, sku=input.skus, productId=input.product_ids)
        return OperationResult.ok(productVariants=_page(rows, input))

    async def get_customers(self, input: GetCustomersInput) -> OperationResult:
        await self._enter("get_customers")
        rows = _match(self.data.customers.values(), id=input.ids, email=input.emails)
        return OperationResult.ok(customers=_page(rows, input))

    async def get_fulfillments(self, input: GetFulfillmentsInput) -> OperationResult:
        await self._enter("get_fulfillments")
        rows = _match(self.data.fulfillments.values(), id=input.ids, orderId=input.order_ids)
        return OperationResult.ok(fulfillments=_page(rows, input))

    async def get_returns(self, input: GetReturnsInput) -> OperationResult:
        await self._enter("get_returns")
        rows = _match(self.data.returns.values(), id=input.ids, orderId=input.order_ids,
                      returnNumber=input.return_numbers, status=input.statuses, outcome=input.outcomes)
        return OperationResult.ok(returns=_page(rows, input))

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    def _order(self, order_id: str) -> Record:
        order = self.data.orders.get(order_id)
        if order is None:
            raise AdapterError(f"Order not found: {order_id}", "ORDER_NOT_FOUND", {"orderId": order_id})
        return order


def _match(rows: Iterable[Record], **filters: list[str] | None) -> list[Record]:
    """Keep rows whose value for each given key is in the filter list."""
    active = {k: set(v) for k, v in filters.items() if v}
    return [r for r in rows if all(r.get(k) in allowed for k, allowed in active.items())]


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=UTC)


def _ts(value: object) -> datetime | None:
    return _aware(datetime.fromisoformat(value)) if isinstance(value, str) else None


def _page(rows: list[Record], q: TemporalPagination) -> list[Record]:
    def within(row: Record) -> bool:
        created, updated = _ts(row.get("createdAt")), _ts(row.get("updatedAt"))
        checks = (
            (q.created_at_min, created, lambda b, v: v >= b),
            (q.created_at_max, created, lambda b, v: v <= b),
            (q.updated_at_min, updated, lambda b, v: v >= b),
            (q.updated_at_max, updated, lambda b, v: v <= b),
        )
        return all(bound is None or (value is not None and cmp(_aware(bound), value)) for bound, value, cmp in checks)

    return [r for r in rows if within(r)][q.skip:q.skip + q.page_size]
