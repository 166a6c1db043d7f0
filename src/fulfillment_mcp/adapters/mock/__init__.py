from .adapter import MockAdapter, MockAdapterOptions
from .data import MockDataStore

__all__ = ["MockAdapter", "MockAdapterOptions", "MockDataStore"]
