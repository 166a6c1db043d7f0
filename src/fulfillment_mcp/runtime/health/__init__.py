"""Operation metrics and health aggregation."""

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
from .monitor import DEFAULT_MAX_HISTORY, HealthMonitor

__all__ = [
    "CheckStatus",
    "HealthCheck",
    "HealthState",
    "HealthStatus",
    "PerformanceRecord",
    "PerformanceStats",
    "ServiceMetrics",
    "SystemMetrics",
    "HealthMonitor",
    "DEFAULT_MAX_HISTORY",
]
