"""Shared building blocks for entity and tool-input schemas.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for every schema: camelCase aliases, populate by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CustomField(WireModel):
    name: str
    value: str


class Address(WireModel):
    """Postal address; every field is optional."""

    address1: str | None = Field(None, description='Primary street address (e.g., "123 Main Street")')
    address2: str | None = Field(None, description="Apartment, suite, or unit number")
    city: str | None = None
    company: str | None = None
    country: str | None = Field(None, description="ISO 3166-1 alpha-2 country code")
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    state_or_province: str | None = None
    zip_code_or_postal_code: str | None = None


class CustomerAddress(WireModel):
    name: str | None = Field(None, description="home, work, billing, shipping, etc")
    address: Address


class OrderLineItem(WireModel):
    id: str | None = None
    sku: Annotated[str, Field(min_length=1, description="Product variant SKU")]
    quantity: Annotated[int, Field(ge=1, description="Quantity ordered")]
    unit_price: Annotated[float, Field(ge=0)] | None = None
    total_price: Annotated[float, Field(ge=0)] | None = None
    name: str | None = None
    custom_fields: list[CustomField] | None = None


class ShippingInfo(WireModel):
    """Shipping fields shared by orders."""

    shipping_address: Address | None = None
    shipping_carrier: str | None = None
    shipping_class: str | None = None
    shipping_code: str | None = None
    shipping_note: str | None = None
    shipping_price: float | None = None
    gift_note: str | None = None
    incoterms: str | None = None


class SystemFields(WireModel):
    """Read-only fields assigned by the backend."""

    id: str
    external_id: str | None = Field(None, description="ID of the entity in the client's system")
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tenant_id: str | None = None


class TemporalPagination(WireModel):
    """Time-window filters plus skip/page-size paging."""

    updated_at_min: datetime | None = Field(None, description="Minimum updated at date (inclusive)")
    updated_at_max: datetime | None = Field(None, description="Maximum updated at date (inclusive)")
    created_at_min: datetime | None = Field(None, description="Minimum created at date (inclusive)")
    created_at_max: datetime | None = Field(None, description="Maximum created at date (inclusive)")
    page_size: Annotated[int, Field(gt=0, description="Results per page")] = 10
    skip: Annotated[int, Field(ge=0, description="Results to skip; increment by page_size to page")] = 0
