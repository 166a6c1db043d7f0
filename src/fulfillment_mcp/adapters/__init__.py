"""Adapter contract, loading, and bundled implementations."""

from .base import (
    LIFECYCLE,
    OPERATIONS,
    AdapterCapabilities,
    FulfillmentAdapter,
    implements_contract,
)
from .factory import ENTRY_POINT_GROUP, AdapterFactory
from .http import HttpApiClient, status_to_code
from .mock import MockAdapter, MockAdapterOptions

__all__ = [
    "AdapterCapabilities",
    "AdapterFactory",
    "ENTRY_POINT_GROUP",
    "FulfillmentAdapter",
    "HttpApiClient",
    "LIFECYCLE",
    "MockAdapter",
    "MockAdapterOptions",
    "OPERATIONS",
    "implements_contract",
    "status_to_code",
]
