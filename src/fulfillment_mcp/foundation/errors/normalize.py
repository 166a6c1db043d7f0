"""Map any observed failure onto a NormalizedError.

The mapping is total (every exception lands on exactly one code) and
idempotent (already-normalized inputs come back unchanged).
"""

from __future__ import annotations

import errno
import socket

import httpx

from .errors import (
    AdapterError,
    BackendConnectionError,
    ConfigurationError,
    DomainError,
    ErrorCode,
    NormalizedError,
    OperationTimeoutError,
    ValidationError,
)

# errno values treated as transport-level connectivity failures
CONNECTIVITY_ERRNOS: frozenset[int] = frozenset({
    errno.ECONNRESET,
    errno.ETIMEDOUT,
    errno.ECONNREFUSED,
    errno.EHOSTUNREACH,
    errno.ENETUNREACH,
})


def is_connectivity_error(exc: BaseException) -> bool:
    """Low-level signals that the backend was unreachable."""
    if isinstance(exc, (ConnectionError, socket.gaierror, httpx.TransportError)):
        return True
    return isinstance(exc, OSError) and exc.errno in CONNECTIVITY_ERRNOS


def normalize_error(exc: BaseException | NormalizedError) -> NormalizedError:
    """Convert a failure into the domain taxonomy.

    Args:
        exc: Any exception, or an already-normalized error

    Returns:
        NormalizedError with a stable code and retryable flag
    """
    match exc:
        case NormalizedError():
            return exc
        case DomainError():
            return exc.error
        case ValidationError():
            return NormalizedError(
                code=ErrorCode.VALIDATION_ERROR,
                message=exc.message,
                details={"field": exc.field, "issues": exc.issues},
            )
        case AdapterError():
            return NormalizedError(
                code=exc.code,
                message=exc.message,
                retryable=exc.retryable,
                details={"original_code": exc.adapter_code, "details": exc.details},
            )
        case BackendConnectionError():
            return NormalizedError(code=ErrorCode.CONNECTION_ERROR, message=exc.message, retryable=True, details=exc.details)
        case ConfigurationError():
            return NormalizedError(code=ErrorCode.CONFIGURATION_ERROR, message=exc.message, details=exc.details)
        case OperationTimeoutError():
            return NormalizedError(code=ErrorCode.TIMEOUT, message=exc.message, retryable=True, details={"budget_ms": exc.budget_ms})
        case _ if is_connectivity_error(exc):
            return NormalizedError(
                code=ErrorCode.CONNECTION_ERROR,
                message=str(exc) or "Connection failed",
                retryable=True,
                details={"error_type": type(exc).__name__},
            )
        case _:
            return NormalizedError(
                code=ErrorCode.UNKNOWN_ERROR,
                message=str(exc) or type(exc).__name__,
                details={"error_type": type(exc).__name__},
            )


def to_domain_error(exc: BaseException) -> DomainError:
    """Wrap a failure as a DomainError, reusing one that already is."""
    return exc if isinstance(exc, DomainError) else DomainError(normalize_error(exc))
