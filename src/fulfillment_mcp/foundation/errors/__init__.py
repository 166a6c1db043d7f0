"""Unified error handling for fulfillment operations.

- ErrorCode/NormalizedError: Closed taxonomy every failure maps onto
- FulfillmentError and subclasses: Exceptions raised inside the stack
- ProtocolError/ToolNotFoundError: Conditions that abort a call at the boundary
- normalize_error: Total, idempotent mapping into NormalizedError
- OperationResult: Discriminated success/failure result
"""

from .errors import (
    ADAPTER_CODE_MAP,
    AdapterError,
    BackendConnectionError,
    ConfigurationError,
    DomainError,
    ErrorCode,
    FulfillmentError,
    InvalidInputError,
    NormalizedError,
    OperationTimeoutError,
    ProtocolError,
    ToolNotFoundError,
    ValidationError,
)
from .normalize import CONNECTIVITY_ERRNOS, is_connectivity_error, normalize_error, to_domain_error
from .result import OperationResult

__all__ = [
    # Taxonomy
    "ErrorCode", "NormalizedError", "ADAPTER_CODE_MAP",
    # Exceptions
    "FulfillmentError", "ValidationError", "AdapterError", "InvalidInputError",
    "BackendConnectionError", "ConfigurationError", "OperationTimeoutError", "DomainError",
    "ProtocolError", "ToolNotFoundError",
    # Normalization
    "normalize_error", "to_domain_error", "is_connectivity_error", "CONNECTIVITY_ERRNOS",
    # Results
    "OperationResult",
]
