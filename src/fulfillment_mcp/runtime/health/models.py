"""Metrics records and health status types."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CheckStatus(StrEnum):
    """Result of a single component health check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class HealthState(StrEnum):
    """Overall verdict."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    def as_check(self) -> CheckStatus:
        return _STATE_TO_CHECK[self]


_STATE_TO_CHECK = {
    HealthState.HEALTHY: CheckStatus.PASS,
    HealthState.DEGRADED: CheckStatus.WARN,
    HealthState.UNHEALTHY: CheckStatus.FAIL,
}


def _now() -> datetime:
    return datetime.now(UTC)


class HealthCheck(BaseModel):
    """A component-reported check."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: CheckStatus
    message: str | None = None
    duration_ms: float | None = None
    details: dict[str, Any] | None = None
    checked_at: datetime = Field(default_factory=_now)


class HealthStatus(BaseModel):
    """Overall status with optional per-check breakdown."""

    model_config = ConfigDict(frozen=True)

    status: HealthState
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    checks: list[HealthCheck] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_now)

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthState.HEALTHY

    def to_check(self, component: str) -> HealthCheck:
        """Collapse into a single check posted on behalf of `component`."""
        return HealthCheck(
            name=component,
            status=self.status.as_check(),
            message=self.message,
            details=self.details or None,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Metrics
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class ServiceMetrics:
    """Running counters for one service."""

    request_count: int = 0
    error_count: int = 0
    average_response_time_ms: float = 0.0
    last_operation: str | None = None
    last_operation_time: float | None = None

    def record(self, operation: str, duration_ms: float, success: bool, at: float) -> None:
        self.request_count += 1
        if not success:
            self.error_count += 1
        self.average_response_time_ms += (duration_ms - self.average_response_time_ms) / self.request_count
        self.last_operation = operation
        self.last_operation_time = at

    @property
    def error_rate(self) -> float:
        return self.error_count / self.request_count if self.request_count else 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SystemMetrics:
    """Snapshot of process-wide metrics."""

    uptime_seconds: int = 0
    total_requests: int = 0
    total_errors: int = 0
    average_response_time_ms: float = 0.0
    services: dict[str, ServiceMetrics] = field(default_factory=dict)
    last_operation: str | None = None  # "service.operation"
    last_operation_time: float | None = None
    last_updated: float = field(default_factory=time.time)

    @property
    def error_rate(self) -> float:
        return self.total_errors / self.total_requests if self.total_requests else 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["error_rate"] = self.error_rate
        return data


@dataclass(frozen=True, slots=True)
class PerformanceRecord:
    """One settled operation in the bounded history."""

    operation: str
    duration_ms: float
    success: bool
    timestamp: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PerformanceStats:
    """Aggregate over a slice of the history. Durations in ms, success rate in percent."""

    count: int = 0
    success_rate: float = 0.0
    average_ms: float = 0.0
    min_ms: float = 0.0
    max_ms: float = 0.0
    p95_ms: float = 0.0
    p99_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
