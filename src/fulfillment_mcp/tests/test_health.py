"""Tests for HealthMonitor metrics, percentiles and health verdicts."""

from __future__ import annotations

import asyncio
import random

import pytest

from fulfillment_mcp.runtime.health import (
    CheckStatus,
    HealthCheck,
    HealthMonitor,
    HealthState,
    HealthStatus,
)

# ═════════════════════════════════════════════════════════════════════════════
# Metrics
# ═════════════════════════════════════════════════════════════════════════════


def test_running_mean_and_percentiles(clock) -> None:
    """100 known durations: mean matches, p95/p99 match sorted reference."""
    monitor = HealthMonitor(clock=clock)
    durations = [float(d) for d in range(1, 101)]
    shuffled = durations[:]
    random.Random(3).shuffle(shuffled)
    for d in shuffled:
        monitor.record_operation("orders", "get_orders", d, True)

    metrics = monitor.get_metrics()
    assert metrics.total_requests == 100
    assert metrics.average_response_time_ms == pytest.approx(sum(durations) / 100)

    stats = monitor.get_performance_stats()
    reference = sorted(durations)
    assert stats.count == 100
    assert stats.p95_ms == reference[95]
    assert stats.p99_ms == reference[99]
    assert stats.min_ms == 1.0
    assert stats.max_ms == 100.0
    assert stats.success_rate == 100.0


def test_percentile_clamps_for_tiny_samples(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_operation("orders", "get_orders", 10.0, True)
    stats = monitor.get_performance_stats()
    assert stats.p95_ms == stats.p99_ms == 10.0


def test_per_service_counters(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_operation("orders", "get_orders", 10.0, True)
    monitor.record_operation("orders", "cancel_order", 30.0, False)
    clock.advance(3)
    monitor.record_operation("inventory", "get_inventory", 5.0, True)

    orders = monitor.get_service_metrics("orders")
    assert orders is not None
    assert orders.request_count == 2
    assert orders.error_count == 1
    assert orders.average_response_time_ms == pytest.approx(20.0)
    assert orders.last_operation == "cancel_order"
    assert monitor.get_service_metrics("missing") is None

    system = monitor.get_metrics()
    assert system.last_operation == "inventory.get_inventory"
    assert system.last_operation_time == clock.now
    assert orders.last_operation_time == clock.now - 3
    exported = system.to_dict()
    assert (exported["last_operation"], exported["last_operation_time"]) == ("inventory.get_inventory", clock.now)


def test_history_evicts_oldest(clock) -> None:
    monitor = HealthMonitor(max_history_size=3, clock=clock)
    for i in range(5):
        monitor.record_operation("svc", f"op{i}", float(i), True)
    assert monitor.history_size == 3
    assert monitor.get_metrics().total_requests == 5
    assert monitor.get_performance_stats().min_ms == 2.0


def test_stats_filtered_by_operation_and_window(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_operation("orders", "get_orders", 100.0, True)
    clock.advance(10)
    monitor.record_operation("orders", "get_orders", 20.0, False)
    monitor.record_operation("orders", "cancel_order", 50.0, True)

    assert monitor.get_performance_stats("orders.get_orders").count == 2
    recent = monitor.get_performance_stats("orders.get_orders", window_ms=5_000)
    assert recent.count == 1
    assert recent.success_rate == 0.0
    assert monitor.get_performance_stats("nope").count == 0


def test_zero_window_excludes_older_records(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_operation("orders", "get_orders", 10.0, True)
    clock.advance(100)
    assert monitor.get_performance_stats(window_ms=0).count == 0
    assert monitor.get_performance_stats().count == 1


def test_uptime_recomputed_on_read(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    clock.advance(42)
    assert monitor.get_metrics().uptime_seconds == 42


def test_slow_and_failed_views(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    for i, (duration, ok) in enumerate([(1500.0, True), (200.0, False), (3000.0, False), (50.0, True)]):
        clock.advance(1)
        monitor.record_operation("svc", f"op{i}", duration, ok)

    slow = monitor.get_slow_operations()
    assert [r.duration_ms for r in slow] == [3000.0, 1500.0]
    failed = monitor.get_failed_operations()
    assert [r.operation for r in failed] == ["svc.op2", "svc.op1"]


def test_export_and_reset(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_operation("svc", "op", 5.0, True)
    exported = monitor.export_metrics()
    assert set(exported) == {"system", "health", "performance"}
    assert exported["system"]["total_requests"] == 1
    assert exported["health"]["status"] == "healthy"

    monitor.reset()
    assert monitor.get_metrics().total_requests == 0
    assert monitor.get_metrics().last_operation is None
    assert monitor.history_size == 0


# ═════════════════════════════════════════════════════════════════════════════
# Verdicts
# ═════════════════════════════════════════════════════════════════════════════


def test_healthy_by_default(clock) -> None:
    health = HealthMonitor(clock=clock).get_system_health()
    assert health.status is HealthState.HEALTHY
    assert health.message == "All systems operational"


def test_any_failing_check_is_unhealthy(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_health_check("db", HealthCheck(name="db", status=CheckStatus.PASS))
    monitor.record_health_check("adapter", HealthCheck(name="adapter", status=CheckStatus.FAIL))
    monitor.record_health_check("cache", HealthCheck(name="cache", status=CheckStatus.WARN))

    health = monitor.get_system_health()
    assert health.status is HealthState.UNHEALTHY
    assert health.details["unhealthy_components"] == ["adapter"]


def test_warning_check_is_degraded(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_health_check("cache", HealthCheck(name="cache", status=CheckStatus.WARN))
    assert monitor.get_system_health().status is HealthState.DEGRADED


def test_error_rate_above_threshold_is_degraded(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    for i in range(10):
        monitor.record_operation("svc", "op", 1.0, i != 0)
    assert monitor.get_system_health().status is HealthState.HEALTHY  # exactly 10%

    monitor.record_operation("svc", "op", 1.0, False)
    health = monitor.get_system_health()
    assert health.status is HealthState.DEGRADED
    assert health.message.startswith("High error rate")


def test_error_rate_does_not_mask_failing_check(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    for _ in range(5):
        monitor.record_operation("svc", "op", 1.0, False)
    monitor.record_health_check("adapter", HealthCheck(name="adapter", status=CheckStatus.FAIL))
    assert monitor.get_system_health().status is HealthState.UNHEALTHY
    monitor.clear_health_check("adapter")
    assert monitor.get_system_health().status is HealthState.DEGRADED


def test_health_status_collapses_to_check(clock) -> None:
    monitor = HealthMonitor(clock=clock)
    monitor.record_health_check("adapter", HealthStatus(status=HealthState.DEGRADED, message="slow backend"))
    check = monitor.get_health_checks()["adapter"]
    assert check.status is CheckStatus.WARN
    assert check.message == "slow backend"


# ═════════════════════════════════════════════════════════════════════════════
# Periodic updater
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_updater_lifecycle() -> None:
    monitor = HealthMonitor()
    monitor.start(10)
    assert monitor.running
    await asyncio.sleep(0.03)
    await monitor.restart(20)
    assert monitor.running
    await monitor.stop()
    assert not monitor.running
    await monitor.stop()


def test_rejects_empty_history() -> None:
    with pytest.raises(ValueError):
        HealthMonitor(max_history_size=0)
