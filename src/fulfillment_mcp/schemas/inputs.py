"""Tool input schemas, one per operation."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Self

from pydantic import Field, field_validator, model_validator

from .common import Address, CustomField, TemporalPagination, WireModel
from .entities import OrderFields, ReturnFields


# ─────────────────────────────────────────────────────────────────────────────
# Actions
# ─────────────────────────────────────────────────────────────────────────────


class CreateSalesOrderInput(WireModel):
    order: OrderFields


class CancelLineItem(WireModel):
    id: str | None = None
    sku: Annotated[str, Field(min_length=1)]
    quantity: Annotated[int, Field(ge=1)]


class CancelOrderInput(WireModel):
    order_id: str = Field(..., description="ID of the order to cancel")
    reason: str | None = Field(None, description="Reason for cancellation")
    notify_customer: bool | None = Field(None, description="Send a cancellation notification")
    notes: str | None = None
    line_items: list[CancelLineItem] | None = Field(
        None, description="Specific line items to cancel (omit to cancel the entire order)"
    )


class UpdateLineItem(WireModel):
    sku: Annotated[str, Field(min_length=1)]
    quantity: Annotated[int, Field(ge=1)]
    unit_price: Annotated[float, Field(ge=0)]
    total_price: Annotated[float, Field(ge=0)] | None = None
    name: str | None = None
    custom_fields: list[CustomField] | None = None


class OrderUpdates(WireModel):
    """Mutable order fields; at least one must be present."""

    name: str | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    shipping_carrier: str | None = None
    shipping_class: str | None = None
    shipping_code: str | None = None
    shipping_note: str | None = None
    shipping_price: float | None = None
    gift_note: str | None = None
    currency: str | None = None
    customer: dict[str, Any] | None = None
    discounts: list[dict[str, Any]] | None = None
    line_items: list[UpdateLineItem] | None = None
    order_discount: float | None = None
    order_note: str | None = None
    order_source: str | None = None
    order_tax: float | None = None
    payment_status: str | None = None
    sub_total_price: float | None = None
    total_price: float | None = None
    tags: list[str] | None = None
    custom_fields: list[CustomField] | None = None

    @model_validator(mode="after")
    def _not_empty(self) -> Self:
        if not self.model_fields_set:
            raise ValueError("At least one update field is required")
        return self


class UpdateOrderInput(WireModel):
    id: str = Field(..., description="Order ID")
    updates: OrderUpdates = Field(..., description="Fields to update")


class ShipmentDimensions(WireModel):
    length: Annotated[float, Field(ge=0)] | None = None
    width: Annotated[float, Field(ge=0)] | None = None
    height: Annotated[float, Field(ge=0)] | None = None
    unit: Literal["in", "cm"] = "in"


class ShipmentDetails(WireModel):
    carrier: str | None = None
    service: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    estimated_delivery: str | None = None
    shipping_cost: Annotated[float, Field(ge=0)] | None = None
    weight: Annotated[float, Field(ge=0)] | None = Field(None, description="Package weight in pounds")
    dimensions: ShipmentDimensions | None = None


class ShipmentLineItem(WireModel):
    id: str | None = None
    sku: Annotated[str, Field(min_length=1)]
    quantity: Annotated[int, Field(ge=1)]


class FulfillOrderInput(WireModel):
    order_id: str = Field(..., description="Order ID to ship")
    shipping_info: ShipmentDetails
    items: list[ShipmentLineItem] = Field(..., description="Items in this shipment (partial shipments allowed)")
    shipping_address: Address
    notify_customer: bool | None = None
    notes: str | None = None


class CreateReturnInput(WireModel):
    return_: ReturnFields = Field(..., alias="return")


# ─────────────────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────────────────


class GetOrdersInput(TemporalPagination):
    ids: list[str] | None = None
    external_ids: list[str] | None = None
    statuses: list[str] | None = None
    names: list[str] | None = Field(None, description="Friendly order identifiers")
    include_line_items: bool = True
    include_shipments: bool = True
    include_payments: bool = False
    include_history: bool = False


class GetInventoryInput(WireModel):
    skus: list[str] = Field(..., description="SKUs to get inventory for")
    location_ids: list[str] | None = Field(None, description="Restrict to these locations")

    @field_validator("skus")
    @classmethod
    def _at_least_one(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one SKU is required")
        return v


class GetProductsInput(TemporalPagination):
    ids: list[str] | None = None
    skus: list[str] | None = None
    names: list[str] | None = None


class GetProductVariantsInput(TemporalPagination):
    variant_ids: list[str] | None = None
    skus: list[str] | None = None
    product_ids: list[str] | None = None


class GetCustomersInput(TemporalPagination):
    ids: list[str] | None = None
    emails: list[str] | None = None


class GetFulfillmentsInput(TemporalPagination):
    ids: list[str] | None = None
    order_ids: list[str] | None = None


class GetReturnsInput(TemporalPagination):
    ids: list[str] | None = None
    order_ids: list[str] | None = None
    return_numbers: list[str] | None = None
    statuses: list[str] | None = None
    outcomes: list[str] | None = None
