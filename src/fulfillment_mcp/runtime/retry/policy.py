"""Bounded exponential retry for asynchronous operations.

Options resolve field by field: call-site value, then process-wide
RetrySettings, then the caller's fallback defaults, then built-ins. The
resolved snapshot is fixed when an operation starts, so `set_config` only
affects operations started afterwards.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import socket
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, TypeVar

import httpx

from fulfillment_mcp.foundation.errors import ConfigurationError, FulfillmentError

from .backoff import ExponentialBackoff

if TYPE_CHECKING:
    from fulfillment_mcp.foundation.config import RetrySettings

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]
RetryPredicate = Callable[[BaseException], bool]

logger = logging.getLogger("fulfillment_mcp.retry")

_RETRYABLE_ERRNOS: frozenset[int] = frozenset({errno.ECONNRESET, errno.ETIMEDOUT})


def is_retryable_default(exc: BaseException) -> bool:
    """Flagged domain errors plus connection reset, DNS failure and connect timeout."""
    if isinstance(exc, FulfillmentError):
        return exc.retryable
    if isinstance(exc, (ConnectionResetError, socket.gaierror, httpx.ConnectTimeout)):
        return True
    return isinstance(exc, OSError) and exc.errno in _RETRYABLE_ERRNOS


@dataclass(frozen=True, slots=True)
class RetryOptions:
    """Per-call retry options. `None` means "not set here".

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        initial_delay_ms: Delay before the first retry
        max_delay_ms: Cap for any single delay
        backoff_multiplier: Growth factor, must be > 1
        is_retryable: Predicate deciding which failures are retried
    """

    max_retries: int | None = None
    initial_delay_ms: float | None = None
    max_delay_ms: float | None = None
    backoff_multiplier: float | None = None
    is_retryable: RetryPredicate | None = None

    def __post_init__(self) -> None:
        if self.max_retries is not None and self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.initial_delay_ms is not None and self.initial_delay_ms < 0:
            raise ConfigurationError("initial_delay_ms must be >= 0")
        if self.max_delay_ms is not None and self.max_delay_ms < 0:
            raise ConfigurationError("max_delay_ms must be >= 0")
        if self.backoff_multiplier is not None and self.backoff_multiplier <= 1:
            raise ConfigurationError("backoff_multiplier must be > 1")

    def merged_over(self, base: RetryOptions) -> RetryOptions:
        """Fields set here win; unset ones come from `base`."""
        return RetryOptions(**{
            f.name: v if (v := getattr(self, f.name)) is not None else getattr(base, f.name)
            for f in fields(self)
        })

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryOptions:
        return cls(
            max_retries=settings.max_attempts,
            initial_delay_ms=settings.initial_delay_ms,
            max_delay_ms=settings.max_delay_ms,
            backoff_multiplier=settings.backoff_multiplier,
        )


DEFAULT_OPTIONS = RetryOptions(
    max_retries=3,
    initial_delay_ms=1_000,
    max_delay_ms=10_000,
    backoff_multiplier=2.0,
    is_retryable=is_retryable_default,
)

NO_RETRY = RetryOptions(max_retries=0)


@dataclass(frozen=True, slots=True)
class ResolvedRetry:
    """Fully resolved, immutable options for one operation."""

    max_retries: int
    backoff: ExponentialBackoff
    is_retryable: RetryPredicate

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


async def _sleep_ms(ms: float) -> None:
    await asyncio.sleep(ms / 1000)


class RetryPolicy:
    """Re-invokes failing operations with exponential backoff.

    Example:
        >>> policy = RetryPolicy()
        >>> await policy.execute(lambda: client.fetch(), RetryOptions(max_retries=2))
    """

    __slots__ = ("_config", "_sleep")

    def __init__(self, config: RetrySettings | None = None, *, sleep: Sleep | None = None) -> None:
        self._config = config
        self._sleep = sleep or _sleep_ms

    @property
    def config(self) -> RetrySettings | None:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config is None or self._config.enabled

    def set_config(self, config: RetrySettings | None) -> None:
        """Swap process-wide defaults; in-flight operations keep their snapshot."""
        self._config = config

    def resolve(self, options: RetryOptions | None = None, *, fallback: RetryOptions | None = None) -> ResolvedRetry:
        """Snapshot options: call-site > process config > fallback > built-ins."""
        base = fallback.merged_over(DEFAULT_OPTIONS) if fallback else DEFAULT_OPTIONS
        if self._config is not None:
            base = RetryOptions.from_settings(self._config).merged_over(base)
        opts = (options or RetryOptions()).merged_over(base)
        return ResolvedRetry(
            max_retries=opts.max_retries if self.enabled else 0,  # type: ignore[arg-type]
            backoff=ExponentialBackoff(
                initial_delay_ms=opts.initial_delay_ms,  # type: ignore[arg-type]
                max_delay_ms=opts.max_delay_ms,  # type: ignore[arg-type]
                multiplier=opts.backoff_multiplier,  # type: ignore[arg-type]
            ),
            is_retryable=opts.is_retryable or is_retryable_default,
        )

    async def execute(
        self,
        op: Callable[[], Awaitable[T]],
        options: RetryOptions | None = None,
        *,
        fallback: RetryOptions | None = None,
    ) -> T:
        """Run `op` up to max_retries + 1 times.

        The last error (or the first non-retryable one) is re-raised unchanged.
        When retries are disabled in config, `op` runs exactly once.
        """
        if not self.enabled:
            return await op()

        resolved = self.resolve(options, fallback=fallback)
        delays = resolved.backoff.delays()
        attempt = 0
        while True:
            try:
                return await op()
            except Exception as e:
                retryable = resolved.is_retryable(e)
                if attempt >= resolved.max_retries or not retryable:
                    logger.warning(
                        f"Operation failed, not retrying (attempt {attempt + 1}/{resolved.max_attempts}, "
                        f"retryable={retryable}): {e}"
                    )
                    raise
                delay = next(delays)
                logger.warning(
                    f"Operation failed, retrying in {delay:g}ms (attempt {attempt + 1}/{resolved.max_attempts}): {e}"
                )
                await self._sleep(delay)
                attempt += 1

    async def execute_all(
        self,
        ops: list[Callable[[], Awaitable[T]]],
        options: RetryOptions | None = None,
    ) -> list[T]:
        """Run operations concurrently, each with its own retry loop; first failure propagates."""
        return list(await asyncio.gather(*(self.execute(op, options) for op in ops)))

    async def execute_all_settled(
        self,
        ops: list[Callable[[], Awaitable[T]]],
        options: RetryOptions | None = None,
    ) -> list[T | BaseException]:
        """Like execute_all, but failures are returned in place of results."""
        return list(await asyncio.gather(*(self.execute(op, options) for op in ops), return_exceptions=True))
