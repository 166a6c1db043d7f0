"""fulfillment-mcp: tool dispatch and resilience core for commerce fulfillment.

Fulfillment operations (orders, inventory, returns, ...) are exposed as
schema-validated tools. Each call is dispatched through a service layer
that applies timeouts, bounded retries and error normalization before
reaching a pluggable backend adapter, while metrics and health are
aggregated along the way.

Quick Start:
    >>> from fulfillment_mcp import ServiceOrchestrator, ToolRegistry, register_tools
    >>> orchestrator = ServiceOrchestrator()
    >>> await orchestrator.initialize(AdapterSettings(type="built-in", name="mock"))
    >>> registry = ToolRegistry()
    >>> register_tools(registry, orchestrator)
    >>> await registry.execute("get-orders", {"statuses": ["new"]})
"""

__version__ = "0.3.0"

from .adapters import AdapterFactory, FulfillmentAdapter, HttpApiClient, MockAdapter
from .foundation.config import AdapterSettings, ServerSettings, get_settings, load_settings
from .foundation.core import BaseTool, ToolDescriptor, ToolMetadata
from .foundation.errors import (
    AdapterError,
    DomainError,
    ErrorCode,
    FulfillmentError,
    NormalizedError,
    OperationResult,
    ProtocolError,
    ToolNotFoundError,
    ValidationError,
    normalize_error,
)
from .foundation.registry import DuplicateToolError, ToolRegistry
from .foundation.validation import SchemaValidator
from .runtime.health import HealthMonitor, HealthState
from .runtime.retry import RetryOptions, RetryPolicy
from .runtime.timeout import TimeoutBudgets, TimeoutGuard
from .services import ErrorHandler, ServiceOrchestrator
from .tools import register_tools

__all__ = [
    "__version__",
    # Errors
    "ErrorCode", "NormalizedError", "FulfillmentError", "ValidationError", "AdapterError",
    "DomainError", "ProtocolError", "ToolNotFoundError", "normalize_error", "OperationResult",
    # Config
    "ServerSettings", "AdapterSettings", "get_settings", "load_settings",
    # Tools
    "BaseTool", "ToolMetadata", "ToolDescriptor", "ToolRegistry", "DuplicateToolError", "register_tools",
    "SchemaValidator",
    # Runtime
    "TimeoutGuard", "TimeoutBudgets", "RetryPolicy", "RetryOptions", "HealthMonitor", "HealthState",
    # Services and adapters
    "ServiceOrchestrator", "ErrorHandler", "FulfillmentAdapter", "AdapterFactory", "MockAdapter",
    "HttpApiClient",
]
