"""Tests for RetryPolicy and ExponentialBackoff.

Validates:
- Attempt counts and error identity
- Deterministic backoff sequence
- Option resolution order and config snapshots
"""

from __future__ import annotations

import asyncio

import pytest

from fulfillment_mcp.foundation.config import RetrySettings
from fulfillment_mcp.foundation.errors import (
    AdapterError,
    BackendConnectionError,
    ConfigurationError,
    ValidationError,
)
from fulfillment_mcp.runtime.retry import (
    ExponentialBackoff,
    RetryOptions,
    RetryPolicy,
    is_retryable_default,
)


class Flaky:
    """Raises the given errors in order, then returns `value`."""

    def __init__(self, *errors: BaseException, value: object = "ok") -> None:
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


class AlwaysFails:
    def __init__(self) -> None:
        self.calls = 0
        self.raised: list[BaseException] = []

    async def __call__(self) -> object:
        self.calls += 1
        err = BackendConnectionError(f"attempt {self.calls}")
        self.raised.append(err)
        raise err


# ═════════════════════════════════════════════════════════════════════════════
# Backoff
# ═════════════════════════════════════════════════════════════════════════════


def test_default_backoff_sequence() -> None:
    """Defaults double from 1000ms and cap at 10000ms."""
    assert ExponentialBackoff().schedule(7) == [1000, 2000, 4000, 8000, 10000, 10000, 10000]


def test_backoff_matches_closed_form() -> None:
    """delay(k) == min(initial * multiplier**k, max)."""
    b = ExponentialBackoff(initial_delay_ms=300, max_delay_ms=5000, multiplier=3.0)
    for k in range(8):
        assert b.delay(k) == min(300 * 3.0**k, 5000)


# ═════════════════════════════════════════════════════════════════════════════
# Attempt counting
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize("n", [0, 1, 3, 5])
async def test_permanent_failure_runs_n_plus_one_times(n: int, sleeps) -> None:
    """A permanently failing retryable op runs exactly max_retries + 1 times."""
    op = AlwaysFails()
    policy = RetryPolicy(sleep=sleeps)

    with pytest.raises(BackendConnectionError) as exc_info:
        await policy.execute(op, RetryOptions(max_retries=n, initial_delay_ms=10))

    assert op.calls == n + 1
    assert exc_info.value is op.raised[-1]
    assert len(sleeps.delays) == n


@pytest.mark.asyncio
async def test_sleep_sequence_follows_backoff(sleeps) -> None:
    op = AlwaysFails()
    policy = RetryPolicy(sleep=sleeps)

    with pytest.raises(BackendConnectionError):
        await policy.execute(op, RetryOptions(max_retries=5))

    assert sleeps.delays == [1000, 2000, 4000, 8000, 10000]


@pytest.mark.asyncio
async def test_non_retryable_aborts_after_one_attempt(sleeps) -> None:
    """Validation and not-found failures are never retried."""
    for error in (ValidationError("bad"), AdapterError("missing", "ORDER_NOT_FOUND"), ValueError("boom")):
        op = Flaky(error, error, error)
        with pytest.raises(type(error)):
            await RetryPolicy(sleep=sleeps).execute(op, RetryOptions(max_retries=5))
        assert op.calls == 1
    assert sleeps.delays == []


@pytest.mark.asyncio
async def test_recovers_after_transient_failures(sleeps) -> None:
    op = Flaky(BackendConnectionError("reset"), BackendConnectionError("reset"), value=42)
    result = await RetryPolicy(sleep=sleeps).execute(op, RetryOptions(max_retries=3, initial_delay_ms=100))
    assert result == 42
    assert op.calls == 3
    assert sleeps.delays == [100, 200]


@pytest.mark.asyncio
async def test_custom_predicate_overrides_default(sleeps) -> None:
    op = Flaky(ValueError("flaky"), value="done")
    opts = RetryOptions(max_retries=1, initial_delay_ms=5, is_retryable=lambda e: isinstance(e, ValueError))
    assert await RetryPolicy(sleep=sleeps).execute(op, opts) == "done"


# ═════════════════════════════════════════════════════════════════════════════
# Configuration
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_disabled_config_runs_once(sleeps) -> None:
    op = AlwaysFails()
    policy = RetryPolicy(RetrySettings(enabled=False), sleep=sleeps)
    with pytest.raises(BackendConnectionError):
        await policy.execute(op, RetryOptions(max_retries=5))
    assert op.calls == 1
    assert sleeps.delays == []


def test_resolution_order() -> None:
    """Call-site > process config > fallback > built-ins."""
    policy = RetryPolicy(RetrySettings(max_attempts=4, initial_delay_ms=200))
    fallback = RetryOptions(max_retries=2, initial_delay_ms=500, max_delay_ms=700)

    resolved = policy.resolve(RetryOptions(initial_delay_ms=50), fallback=fallback)

    assert resolved.max_retries == 4
    assert resolved.backoff.initial_delay_ms == 50
    assert resolved.backoff.max_delay_ms == 10_000  # from config defaults
    assert resolved.max_attempts == 5


def test_fallback_used_without_config() -> None:
    resolved = RetryPolicy().resolve(fallback=RetryOptions(max_retries=2, initial_delay_ms=500))
    assert resolved.max_retries == 2
    assert resolved.backoff.initial_delay_ms == 500
    assert resolved.backoff.multiplier == 2.0


@pytest.mark.asyncio
async def test_in_flight_operation_keeps_snapshot() -> None:
    """set_config during an operation does not change its options."""
    gate = asyncio.Event()
    delays: list[float] = []

    async def sleep(ms: float) -> None:
        delays.append(ms)
        await gate.wait()

    policy = RetryPolicy(RetrySettings(max_attempts=2, initial_delay_ms=100), sleep=sleep)
    op = AlwaysFails()
    task = asyncio.create_task(policy.execute(op))
    await asyncio.sleep(0)
    policy.set_config(RetrySettings(max_attempts=0, initial_delay_ms=999))
    gate.set()

    with pytest.raises(BackendConnectionError):
        await task
    assert op.calls == 3
    assert delays == [100, 200]


def test_invalid_options_rejected() -> None:
    with pytest.raises(ConfigurationError):
        RetryOptions(max_retries=-1)
    with pytest.raises(ConfigurationError):
        RetryOptions(backoff_multiplier=1.0)


def test_default_predicate() -> None:
    assert is_retryable_default(BackendConnectionError("down"))
    assert is_retryable_default(ConnectionResetError())
    assert is_retryable_default(AdapterError("busy", details={"retryable": True}))
    assert not is_retryable_default(AdapterError("missing", "ORDER_NOT_FOUND"))
    assert not is_retryable_default(ConfigurationError("bad config"))
    assert not is_retryable_default(KeyError("x"))


# ═════════════════════════════════════════════════════════════════════════════
# Batch helpers
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_execute_all_settled(sleeps) -> None:
    policy = RetryPolicy(sleep=sleeps)
    ok = Flaky(value=1)
    bad = Flaky(ValueError("nope"))
    results = await policy.execute_all_settled([ok, bad], RetryOptions(max_retries=1))
    assert results[0] == 1
    assert isinstance(results[1], ValueError)


@pytest.mark.asyncio
async def test_execute_all_propagates_first_failure(sleeps) -> None:
    policy = RetryPolicy(sleep=sleeps)
    with pytest.raises(ValueError):
        await policy.execute_all([Flaky(value=1), Flaky(ValueError("nope"))])
