"""Deadline enforcement for asynchronous operations.

The guarded operation runs as its own task. When the budget elapses first,
the caller gets OperationTimeoutError and the task is detached rather than
cancelled: its side effects may still land, so a timeout means "unknown
outcome", not "failed". A done-callback retrieves the detached task's
result so a late failure never shows up as an unretrieved exception.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, TypeVar

from fulfillment_mcp.foundation.errors import ConfigurationError, OperationTimeoutError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fulfillment_mcp.foundation.config import TimeoutSettings

T = TypeVar("T")

Budget = Literal["request", "adapter"] | float | int

logger = logging.getLogger("fulfillment_mcp.timeout")


@dataclass(frozen=True, slots=True)
class TimeoutBudgets:
    """Request (outer) and adapter (inner) budgets in milliseconds."""

    request_ms: float = 30_000
    adapter_ms: float = 5_000

    def __post_init__(self) -> None:
        if self.request_ms <= 0 or self.adapter_ms <= 0:
            raise ConfigurationError("timeout budgets must be positive")
        if self.adapter_ms >= self.request_ms:
            raise ConfigurationError(
                f"adapter timeout ({self.adapter_ms:g}ms) must be less than request timeout ({self.request_ms:g}ms)"
            )

    @classmethod
    def from_settings(cls, settings: TimeoutSettings) -> TimeoutBudgets:
        return cls(request_ms=settings.request_ms, adapter_ms=settings.adapter_ms)


def _discard_late_outcome(task: asyncio.Future[object]) -> None:
    if task.cancelled():
        return
    if (exc := task.exception()) is not None:
        logger.debug(f"Detached operation failed after its deadline: {exc!r}")


class TimeoutGuard:
    """Races operations against configured budgets.

    Example:
        >>> guard = TimeoutGuard(TimeoutBudgets(request_ms=30_000, adapter_ms=5_000))
        >>> await guard.with_timeout(lambda: adapter.get_orders(query), "adapter")
    """

    __slots__ = ("_budgets",)

    def __init__(self, budgets: TimeoutBudgets | None = None) -> None:
        self._budgets = budgets or TimeoutBudgets()

    @property
    def budgets(self) -> TimeoutBudgets:
        return self._budgets

    def set_config(self, settings: TimeoutSettings | TimeoutBudgets) -> None:
        """Swap budgets for operations started from now on."""
        self._budgets = settings if isinstance(settings, TimeoutBudgets) else TimeoutBudgets.from_settings(settings)

    def get_timeout(self, budget: Budget) -> float:
        """Resolve a named budget or pass an explicit one through (ms)."""
        match budget:
            case "request":
                return self._budgets.request_ms
            case "adapter":
                return self._budgets.adapter_ms
            case int() | float() if budget > 0:
                return float(budget)
            case _:
                raise ConfigurationError(f"Invalid timeout budget: {budget!r}")

    async def with_timeout(
        self,
        op: Callable[[], Awaitable[T]],
        budget: Budget = "request",
        *,
        operation: str | None = None,
    ) -> T:
        """Run `op`, raising OperationTimeoutError if it outlives `budget`.

        Args:
            op: Zero-arg callable returning an awaitable
            budget: "request", "adapter", or milliseconds
            operation: Name included in the timeout message
        """
        budget_ms = self.get_timeout(budget)
        task = asyncio.ensure_future(op())
        try:
            done, _ = await asyncio.wait({task}, timeout=budget_ms / 1000)
        except asyncio.CancelledError:
            # Caller gave up; the operation stays detached like a timed-out one
            task.add_done_callback(_discard_late_outcome)
            raise
        if task in done:
            return task.result()
        task.add_done_callback(_discard_late_outcome)
        logger.warning(f"Operation {operation or '<anonymous>'} exceeded {budget_ms:g}ms budget, detaching")
        raise OperationTimeoutError(budget_ms, operation)


async def with_timeout(op: Callable[[], Awaitable[T]], budget_ms: float) -> T:
    """One-off guard with an explicit budget in milliseconds."""
    return await TimeoutGuard().with_timeout(op, budget_ms)
