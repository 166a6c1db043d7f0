"""Error taxonomy and exception hierarchy for fulfillment operations.

Every failure the service layer can observe belongs to one closed set of
codes (ErrorCode). Exceptions carry enough context for `normalize_error`
to map them onto a NormalizedError exactly once.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

if TYPE_CHECKING:
    from collections.abc import Sequence


class ErrorCode(StrEnum):
    """Stable domain error codes surfaced to protocol clients."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    INVALID_ORDER_STATE = "INVALID_ORDER_STATE"
    ADAPTER_ERROR = "ADAPTER_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Adapter-level codes that map one-to-one onto a domain code
ADAPTER_CODE_MAP: dict[str, ErrorCode] = {
    "ORDER_NOT_FOUND": ErrorCode.ORDER_NOT_FOUND,
    "PRODUCT_NOT_FOUND": ErrorCode.PRODUCT_NOT_FOUND,
    "CUSTOMER_NOT_FOUND": ErrorCode.CUSTOMER_NOT_FOUND,
    "INSUFFICIENT_INVENTORY": ErrorCode.INSUFFICIENT_INVENTORY,
    "INVALID_ORDER_STATE": ErrorCode.INVALID_ORDER_STATE,
}


class NormalizedError(BaseModel):
    """A failure mapped into the domain taxonomy.

    Built once per failure, at the point it is first observed, and never
    rebuilt afterwards.

    Attributes:
        code: Machine-readable error classification
        message: Human-readable error message
        retryable: Whether a re-attempt might succeed
        details: Optional structured diagnostics
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "examples": [{
                "code": "ORDER_NOT_FOUND",
                "message": "Order ord_123 not found",
                "retryable": False,
            }],
        },
    )

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    message: Annotated[str, Field(min_length=1)]
    retryable: bool = False
    details: dict[str, object] | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: object) -> object:
        """Accept exceptions and blank strings."""
        if isinstance(v, BaseException):
            v = str(v).strip() or type(v).__name__
        if not v or (isinstance(v, str) and not v.strip()):
            return "Unknown error"
        return v

    @computed_field
    @property
    def is_not_found(self) -> bool:
        return self.code in _NOT_FOUND_CODES

    def render(self) -> str:
        """Format error for display in a tool response."""
        return f"[{self.code}] {self.message}"


_NOT_FOUND_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.ORDER_NOT_FOUND,
    ErrorCode.PRODUCT_NOT_FOUND,
    ErrorCode.CUSTOMER_NOT_FOUND,
})


# ─────────────────────────────────────────────────────────────────────────────
# Exceptions
# ─────────────────────────────────────────────────────────────────────────────


class FulfillmentError(Exception):
    """Base class for failures raised inside the fulfillment stack."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    retryable: bool = False
    # Malformed input; aborts the call at the boundary instead of becoming a failure result
    is_protocol_error: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        retryable: bool | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        self.details = details

    def to_dict(self) -> dict[str, object]:
        return {
            "type": type(self).__name__,
            "code": str(self.code),
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }


class ValidationError(FulfillmentError):
    """Input did not conform to its declared schema.

    Attributes:
        field: Dotted path of the first offending field ("data" for root issues)
        issues: Every issue as {field, message, type}
    """

    code = ErrorCode.VALIDATION_ERROR
    is_protocol_error = True

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        issues: Sequence[dict[str, str]] = (),
    ) -> None:
        self.field = field
        self.issues = list(issues)
        super().__init__(message, details={"field": field, "issues": self.issues})


class AdapterError(FulfillmentError):
    """Failure reported by an adapter.

    `adapter_code` is the backend's own code (e.g. ORDER_NOT_FOUND, NOT_CONNECTED).
    Retryability is read from ``details["retryable"]`` when it is a bool.
    """

    code = ErrorCode.ADAPTER_ERROR

    def __init__(self, message: str, adapter_code: str = "ADAPTER_ERROR", details: dict[str, object] | None = None) -> None:
        flag = (details or {}).get("retryable")
        super().__init__(
            message,
            code=ADAPTER_CODE_MAP.get(adapter_code, ErrorCode.ADAPTER_ERROR),
            retryable=flag if isinstance(flag, bool) else False,
            details=details,
        )
        self.adapter_code = adapter_code


class InvalidInputError(AdapterError):
    """Adapter rejected its input after validation passed."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__(message, "INVALID_INPUT", details)


class BackendConnectionError(FulfillmentError):
    """The backend could not be reached."""

    code = ErrorCode.CONNECTION_ERROR
    retryable = True


class ConfigurationError(FulfillmentError):
    """Invalid or missing configuration. Never retried."""

    code = ErrorCode.CONFIGURATION_ERROR


class OperationTimeoutError(FulfillmentError):
    """An operation did not settle within its budget.

    The underlying operation may still complete; callers treat this as an
    unknown outcome.
    """

    code = ErrorCode.TIMEOUT
    retryable = True

    def __init__(self, budget_ms: float, operation: str | None = None) -> None:
        label = f"Operation '{operation}'" if operation else "Operation"
        super().__init__(f"{label} timed out after {budget_ms:g}ms", details={"budget_ms": budget_ms})
        self.budget_ms = budget_ms


class DomainError(FulfillmentError):
    """Exception carrying an already-normalized error."""

    def __init__(self, error: NormalizedError) -> None:
        super().__init__(error.message, code=error.code, retryable=error.retryable, details=error.details)
        self.error = error

    @classmethod
    def create(cls, code: ErrorCode, message: str, *, retryable: bool = False, details: dict[str, object] | None = None) -> Self:
        return cls(NormalizedError(code=code, message=message, retryable=retryable, details=details))


# ─────────────────────────────────────────────────────────────────────────────
# Protocol-level errors
# ─────────────────────────────────────────────────────────────────────────────


class ProtocolError(Exception):
    """Malformed request or unknown tool. Aborts the call at the boundary.

    Codes follow JSON-RPC: -32601 method not found, -32602 invalid params.
    """

    INVALID_PARAMS = -32602
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603

    def __init__(self, code: int, message: str, data: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class ToolNotFoundError(ProtocolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(self.METHOD_NOT_FOUND, f"Unknown tool: {name}", {"tool": name})
        self.tool_name = name
