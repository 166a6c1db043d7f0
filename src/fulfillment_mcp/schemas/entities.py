"""Commerce entities exchanged with adapters."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import Field

from .common import (
    Address,
    CustomerAddress,
    CustomField,
    OrderLineItem,
    ShippingInfo,
    SystemFields,
    WireModel,
)


class Customer(SystemFields):
    addresses: list[CustomerAddress] | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    notes: str | None = None
    phone: str | None = None
    status: str | None = None
    type: str | None = Field(None, description='"individual" or "company"')
    custom_fields: list[CustomField] | None = None
    tags: list[str] | None = None


class OrderFields(ShippingInfo):
    """Order body without system fields."""

    external_id: str | None = None
    name: str | None = None
    status: str | None = None
    billing_address: Address | None = None
    currency: str | None = None
    custom_fields: list[CustomField] | None = None
    customer: dict[str, Any] | None = None
    discounts: list[dict[str, Any]] | None = None
    line_items: list[OrderLineItem]
    order_discount: float | None = None
    order_note: str | None = None
    order_source: str | None = Field(None, description="Original order platform (walmart, etsy, ...)")
    order_tax: float | None = None
    payment_status: str | None = None
    payments: list[dict[str, Any]] | None = None
    refunds: list[dict[str, Any]] | None = None
    sub_total_price: float | None = None
    tags: list[str] | None = None
    total_price: float | None = None


class Order(OrderFields, SystemFields):
    """Sales order."""


class ProductOption(WireModel):
    name: str
    values: list[str] | None = None


class Product(SystemFields):
    name: str
    options: list[ProductOption]
    external_product_id: str | None = None
    description: str | None = None
    handle: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    vendor: str | None = None
    categories: list[str] | None = None
    image_urls: list[str] | None = Field(None, alias="imageURLs")
    custom_fields: list[CustomField] | None = None


class VariantSelection(WireModel):
    name: str
    value: str


class Weight(WireModel):
    value: float
    unit: Literal["lb", "oz", "kg", "g"]


class Dimensions(WireModel):
    length: float
    width: float
    height: float
    unit: Literal["cm", "in", "ft"]


class ProductVariant(SystemFields):
    product_id: str
    sku: str
    external_product_id: str | None = None
    barcode: str | None = None
    upc: str | None = None
    title: str | None = None
    selected_options: list[VariantSelection] | None = None
    price: float | None = None
    currency: str | None = None
    compare_at_price: float | None = None
    cost: float | None = None
    cost_currency: str | None = None
    inventory_not_tracked: bool | None = None
    weight: Weight | None = None
    dimensions: Dimensions | None = None
    image_urls: list[str] | None = Field(None, alias="imageURLs")
    taxable: bool | None = None
    tags: list[str] | None = None
    custom_fields: list[CustomField] | None = None


class InventoryItem(WireModel):
    sku: str
    location_id: str
    available: int | None = None
    available_to_promise: int | None = None
    committed: int | None = None
    on_hand: int | None = None
    incoming: int | None = None
    damaged: int | None = None
    hold: int | None = None
    unavailable: int | None = None
    inventory_not_tracked: bool | None = None
    label: str | None = None
    updated_at: datetime | None = None


class Fulfillment(SystemFields):
    order_id: str
    line_items: list[OrderLineItem]
    shipping_address: Address | None = None
    status: str | None = None
    location_id: str | None = None
    shipping_carrier: str | None = None
    shipping_class: str | None = None
    shipping_code: str | None = None
    shipping_price: float | None = None
    shipping_labels: list[str] | None = None
    shipping_note: str | None = None
    tracking_number: str | None = None
    expected_delivery_date: datetime | None = None
    expected_ship_date: datetime | None = None
    ship_by_date: datetime | None = None
    gift_note: str | None = None
    incoterms: str | None = None
    tags: list[str] | None = None
    custom_fields: list[CustomField] | None = None


class ReturnLineItem(WireModel):
    id: str | None = None
    order_line_item_id: str
    sku: str
    quantity_returned: Annotated[int, Field(ge=1)]
    return_reason: str = Field(..., description='e.g. "defective", "wrong_item", "size_issue"')
    unit_price: float | None = None
    refund_amount: Annotated[float, Field(ge=0)] | None = None
    restock_fee: Annotated[float, Field(ge=0)] | None = None
    name: str | None = None
    inspection: dict[str, Any] | None = None


class ExchangeLineItem(WireModel):
    id: str | None = None
    sku: str
    quantity: Annotated[int, Field(ge=1)]
    name: str | None = None
    unit_price: float | None = None
    exchange_order_id: str | None = None
    exchange_order_name: str | None = None


class ReturnLabel(WireModel):
    carrier: str
    tracking_number: str
    status: str | None = None
    url: str | None = None
    rate: float | None = None


class ReturnFields(WireModel):
    """Return body without system fields."""

    external_id: str | None = None
    order_id: str
    outcome: str = Field(..., description="What the customer receives (refund, exchange, ...)")
    return_line_items: list[ReturnLineItem]
    return_number: str | None = None
    status: str | None = None
    exchange_line_items: list[ExchangeLineItem] | None = None
    total_quantity: int | None = None
    return_shipping_address: Address | None = None
    labels: list[ReturnLabel] | None = None
    location_id: str | None = None
    return_total: float | None = None
    exchange_total: float | None = None
    refund_amount: float | None = None
    refund_method: str | None = None
    refund_status: str | None = None
    restocking_fee: float | None = None
    requested_at: datetime | None = None
    received_at: datetime | None = None
    completed_at: datetime | None = None
    customer_note: str | None = None
    internal_note: str | None = None
    decline_reason: str | None = None
    tags: list[str] | None = None
    custom_fields: list[CustomField] | None = None


class Return(ReturnFields, SystemFields):
    """Return (RMA)."""
