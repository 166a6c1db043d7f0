"""Pydantic schemas for commerce entities and tool inputs."""

from .common import (
    Address,
    CustomerAddress,
    CustomField,
    OrderLineItem,
    ShippingInfo,
    SystemFields,
    TemporalPagination,
    WireModel,
)
from .entities import (
    Customer,
    Fulfillment,
    InventoryItem,
    Order,
    OrderFields,
    Product,
    ProductVariant,
    Return,
    ReturnFields,
    ReturnLineItem,
)
from .inputs import (
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
    OrderUpdates,
    UpdateOrderInput,
)

__all__ = [
    # Common
    "WireModel", "Address", "CustomerAddress", "CustomField", "OrderLineItem", "ShippingInfo",
    "SystemFields", "TemporalPagination",
    # Entities
    "Customer", "Fulfillment", "InventoryItem", "Order", "OrderFields", "Product", "ProductVariant",
    "Return", "ReturnFields", "ReturnLineItem",
    # Inputs
    "CreateSalesOrderInput", "CancelOrderInput", "UpdateOrderInput", "OrderUpdates", "FulfillOrderInput",
    "CreateReturnInput", "GetOrdersInput", "GetInventoryInput", "GetProductsInput",
    "GetProductVariantsInput", "GetCustomersInput", "GetFulfillmentsInput", "GetReturnsInput",
]
