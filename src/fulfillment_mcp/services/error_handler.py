"""Retry, timing and error conversion around a single service operation."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, TypeVar

from fulfillment_mcp.foundation.errors import (
    AdapterError,
    BackendConnectionError,
    FulfillmentError,
    OperationResult,
    OperationTimeoutError,
    is_connectivity_error,
    to_domain_error,
)
from fulfillment_mcp.runtime.retry import RetryOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fulfillment_mcp.runtime.health import HealthMonitor
    from fulfillment_mcp.runtime.retry import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("fulfillment_mcp.services")


def is_domain_retryable(exc: BaseException) -> bool:
    """Only failures the stack itself flagged as transient are retried."""
    return isinstance(exc, FulfillmentError) and exc.retryable


def is_adapter_originated(exc: BaseException) -> bool:
    return isinstance(exc, (AdapterError, BackendConnectionError, OperationTimeoutError)) or is_connectivity_error(exc)


# Service-level defaults, overridden by process RetrySettings when configured
SERVICE_RETRY_DEFAULTS = RetryOptions(max_retries=2, initial_delay_ms=500, is_retryable=is_domain_retryable)


class ErrorHandler:
    """Runs operations with retry and records exactly one metric per call.

    Args:
        monitor: Receives one record per settled operation
        retry_policy: Shared policy; its process config wins over service defaults
        service: Service name used in metric records
    """

    __slots__ = ("_monitor", "_retry", "_service", "_in_flight", "_last_operation")

    def __init__(self, monitor: HealthMonitor, retry_policy: RetryPolicy, *, service: str = "fulfillment") -> None:
        self._monitor = monitor
        self._retry = retry_policy
        self._service = service
        self._in_flight: dict[str, int] = {}
        self._last_operation: str | None = None

    @property
    def in_flight(self) -> dict[str, int]:
        return {k: v for k, v in self._in_flight.items() if v}

    @property
    def last_operation(self) -> str | None:
        return self._last_operation

    async def execute_operation(
        self,
        name: str,
        op: Callable[[], Awaitable[T]],
        *,
        service: str | None = None,
        retry_options: RetryOptions | None = None,
    ) -> T:
        """Run `op` under retry; adapter failures surface as DomainError.

        The metric covers total elapsed time across all attempts. A returned
        OperationResult with ``success=False`` counts as a failure.

        Raises:
            DomainError: An adapter-originated failure, normalized
        """
        service = service or self._service
        self._in_flight[name] = self._in_flight.get(name, 0) + 1
        self._last_operation = name
        start = time.perf_counter()
        success = False
        try:
            result = await self._retry.execute(op, retry_options, fallback=SERVICE_RETRY_DEFAULTS)
            success = not isinstance(result, OperationResult) or result.success
            return result
        except Exception as e:
            if not is_adapter_originated(e):
                raise
            domain = to_domain_error(e)
            logger.warning(f"{service}.{name} failed: {domain.error.render()}")
            raise domain from e
        finally:
            self._in_flight[name] -= 1
            self._monitor.record_operation(service, name, (time.perf_counter() - start) * 1000, success)
