"""Rolling metrics and health verdicts.

One HealthMonitor instance is owned by the orchestrator and handed to
every call site that records operations. Counters are updated in single
synchronous statements, so concurrent continuations on one event loop
never interleave inside an update.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
import time
from collections import deque
from collections.abc import Callable
from typing import Any

from .models import (
    CheckStatus,
    HealthCheck,
    HealthState,
    HealthStatus,
    PerformanceRecord,
    PerformanceStats,
    ServiceMetrics,
    SystemMetrics,
)

logger = logging.getLogger("fulfillment_mcp.health")

DEFAULT_MAX_HISTORY = 1_000
DEFAULT_ERROR_RATE_THRESHOLD = 0.10
DEFAULT_UPTIME_INTERVAL_MS = 60_000


def _percentile(sorted_values: list[float], q: float) -> float:
    """Value at floor(n*q), clamped to the last element."""
    idx = math.floor(len(sorted_values) * q)
    return sorted_values[min(idx, len(sorted_values) - 1)]


class HealthMonitor:
    """Aggregates operation metrics and component health checks.

    Args:
        max_history_size: Capacity of the performance history ring buffer
        error_rate_threshold: Lifetime error rate above which status is degraded
        clock: Wall-clock source in seconds (injectable for tests)

    Example:
        >>> monitor = HealthMonitor()
        >>> monitor.record_operation("orders", "get-orders", 42.0, True)
        >>> monitor.get_system_health().status
        <HealthState.HEALTHY: 'healthy'>
    """

    def __init__(
        self,
        max_history_size: int = DEFAULT_MAX_HISTORY,
        *,
        error_rate_threshold: float = DEFAULT_ERROR_RATE_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_history_size <= 0:
            raise ValueError("max_history_size must be positive")
        self._clock = clock
        self._max_history = max_history_size
        self._threshold = error_rate_threshold
        self._start = clock()
        self._metrics = SystemMetrics(last_updated=self._start)
        self._history: deque[PerformanceRecord] = deque(maxlen=max_history_size)
        self._checks: dict[str, HealthCheck] = {}
        self._updater: asyncio.Task[None] | None = None
        self._interval_ms = DEFAULT_UPTIME_INTERVAL_MS

    @property
    def max_history_size(self) -> int:
        return self._max_history

    @property
    def history_size(self) -> int:
        return len(self._history)

    # ─────────────────────────────────────────────────────────────────
    # Recording
    # ─────────────────────────────────────────────────────────────────

    def record_operation(self, service: str, operation: str, duration_ms: float, success: bool) -> None:
        """Record one settled operation."""
        now = self._clock()
        m = self._metrics
        m.total_requests += 1
        if not success:
            m.total_errors += 1
        m.average_response_time_ms += (duration_ms - m.average_response_time_ms) / m.total_requests
        m.last_operation = f"{service}.{operation}"
        m.last_operation_time = now

        svc = m.services.get(service)
        if svc is None:
            svc = m.services[service] = ServiceMetrics()
        svc.record(operation, duration_ms, success, now)

        self._history.append(PerformanceRecord(f"{service}.{operation}", duration_ms, success, now))
        m.last_updated = now

    def record_health_check(self, component: str, check: HealthCheck | HealthStatus) -> None:
        """Store the last-known check for `component`."""
        if isinstance(check, HealthStatus):
            check = check.to_check(component)
        self._checks[component] = check
        logger.debug(f"Health check recorded: {component}={check.status}")

    def clear_health_check(self, component: str) -> None:
        self._checks.pop(component, None)

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    def _uptime(self) -> int:
        return int(self._clock() - self._start)

    def get_metrics(self) -> SystemMetrics:
        """Snapshot with uptime recomputed now."""
        m = self._metrics
        m.uptime_seconds = self._uptime()
        return SystemMetrics(
            uptime_seconds=m.uptime_seconds,
            total_requests=m.total_requests,
            total_errors=m.total_errors,
            average_response_time_ms=m.average_response_time_ms,
            services={k: ServiceMetrics(**v.to_dict()) for k, v in m.services.items()},
            last_operation=m.last_operation,
            last_operation_time=m.last_operation_time,
            last_updated=m.last_updated,
        )

    def get_service_metrics(self, service: str) -> ServiceMetrics | None:
        svc = self._metrics.services.get(service)
        return ServiceMetrics(**svc.to_dict()) if svc else None

    def get_health_checks(self) -> dict[str, HealthCheck]:
        return dict(self._checks)

    def get_system_health(self) -> HealthStatus:
        """Derive the overall verdict from posted checks and lifetime error rate."""
        failing = [c for c, chk in self._checks.items() if chk.status is CheckStatus.FAIL]
        warning = [c for c, chk in self._checks.items() if chk.status is CheckStatus.WARN]
        m = self._metrics
        error_rate = m.error_rate

        if failing:
            status, message = HealthState.UNHEALTHY, f"Unhealthy components: {', '.join(failing)}"
        elif warning:
            status, message = HealthState.DEGRADED, f"Degraded components: {', '.join(warning)}"
        elif error_rate > self._threshold:
            status, message = HealthState.DEGRADED, f"High error rate: {error_rate * 100:.2f}%"
        else:
            status, message = HealthState.HEALTHY, "All systems operational"

        return HealthStatus(
            status=status,
            message=message,
            details={
                "uptime_seconds": self._uptime(),
                "total_requests": m.total_requests,
                "total_errors": m.total_errors,
                "error_rate": round(error_rate, 4),
                "average_response_time_ms": round(m.average_response_time_ms, 2),
                "unhealthy_components": failing,
                "degraded_components": warning,
            },
            checks=list(self._checks.values()),
        )

    def get_performance_stats(self, operation: str | None = None, window_ms: float | None = None) -> PerformanceStats:
        """Stats over history, optionally filtered by "service.operation" and time window."""
        cutoff = self._clock() - window_ms / 1000 if window_ms is not None else float("-inf")
        records = [
            r for r in self._history
            if r.timestamp >= cutoff and (operation is None or r.operation == operation)
        ]
        if not records:
            return PerformanceStats()

        durations = sorted(r.duration_ms for r in records)
        count = len(durations)
        return PerformanceStats(
            count=count,
            success_rate=sum(r.success for r in records) / count * 100,
            average_ms=sum(durations) / count,
            min_ms=durations[0],
            max_ms=durations[-1],
            p95_ms=_percentile(durations, 0.95),
            p99_ms=_percentile(durations, 0.99),
        )

    def get_slow_operations(self, threshold_ms: float = 1_000, limit: int = 10) -> list[PerformanceRecord]:
        """Slowest operations above `threshold_ms`, slowest first."""
        slow = [r for r in self._history if r.duration_ms > threshold_ms]
        return sorted(slow, key=lambda r: r.duration_ms, reverse=True)[:limit]

    def get_failed_operations(self, limit: int = 10) -> list[PerformanceRecord]:
        """Most recent failures, newest first."""
        failed = [r for r in self._history if not r.success]
        return sorted(failed, key=lambda r: r.timestamp, reverse=True)[:limit]

    def export_metrics(self) -> dict[str, Any]:
        """Everything in one JSON-ready dict."""
        return {
            "system": self.get_metrics().to_dict(),
            "health": self.get_system_health().model_dump(mode="json"),
            "performance": {
                "overall": self.get_performance_stats().to_dict(),
                "slow": [r.to_dict() for r in self.get_slow_operations()],
                "failed": [r.to_dict() for r in self.get_failed_operations()],
            },
        }

    def reset(self) -> None:
        """Clear counters and history; restart the uptime clock. Health checks are kept."""
        self._start = self._clock()
        self._metrics = SystemMetrics(last_updated=self._start)
        self._history.clear()
        logger.info("Health monitor metrics reset")

    # ─────────────────────────────────────────────────────────────────
    # Periodic uptime refresh
    # ─────────────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._updater is not None and not self._updater.done()

    def start(self, interval_ms: float | None = None) -> None:
        """Start refreshing uptime every `interval_ms`. Requires a running loop."""
        if self.running:
            return
        if interval_ms is not None:
            self._interval_ms = interval_ms
        self._updater = asyncio.get_running_loop().create_task(self._refresh_uptime())
        logger.debug(f"Uptime updater started ({self._interval_ms:g}ms)")

    async def _refresh_uptime(self) -> None:
        while True:
            await asyncio.sleep(self._interval_ms / 1000)
            self._metrics.uptime_seconds = self._uptime()

    async def stop(self) -> None:
        if self._updater is None:
            return
        self._updater.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._updater
        self._updater = None
        logger.debug("Uptime updater stopped")

    async def restart(self, interval_ms: float | None = None) -> None:
        await self.stop()
        self.start(interval_ms)
