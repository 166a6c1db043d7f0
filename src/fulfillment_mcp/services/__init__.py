"""Service layer: adapter ownership, error handling and orchestration."""

from .adapter_manager import AdapterManager
from .error_handler import SERVICE_RETRY_DEFAULTS, ErrorHandler, is_adapter_originated, is_domain_retryable
from .orchestrator import ADAPTER_COMPONENT, ServiceOrchestrator

__all__ = [
    "ADAPTER_COMPONENT",
    "AdapterManager",
    "ErrorHandler",
    "SERVICE_RETRY_DEFAULTS",
    "ServiceOrchestrator",
    "is_adapter_originated",
    "is_domain_retryable",
]
