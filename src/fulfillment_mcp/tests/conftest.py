"""Shared fixtures: recorded sleeps, a connected mock adapter and a wired orchestrator."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from fulfillment_mcp.adapters import MockAdapter
from fulfillment_mcp.foundation.config import AdapterSettings
from fulfillment_mcp.foundation.registry import ToolRegistry
from fulfillment_mcp.runtime.health import HealthMonitor
from fulfillment_mcp.runtime.retry import RetryPolicy
from fulfillment_mcp.runtime.timeout import TimeoutBudgets, TimeoutGuard
from fulfillment_mcp.services import ServiceOrchestrator
from fulfillment_mcp.tools import register_tools


class SleepRecorder:
    """Stand-in for the retry sleep; records requested delays in ms."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, ms: float) -> None:
        self.delays.append(ms)


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def mock_adapter() -> AsyncIterator[MockAdapter]:
    adapter = MockAdapter()
    await adapter.connect()
    yield adapter
    await adapter.disconnect()


@pytest_asyncio.fixture
async def orchestrator(sleeps: SleepRecorder) -> AsyncIterator[ServiceOrchestrator]:
    orch = ServiceOrchestrator(
        HealthMonitor(),
        TimeoutGuard(TimeoutBudgets(request_ms=2_000, adapter_ms=500)),
        RetryPolicy(sleep=sleeps),
    )
    await orch.initialize(AdapterSettings(type="built-in", name="mock"))
    yield orch
    await orch.cleanup()


@pytest.fixture
def adapter(orchestrator: ServiceOrchestrator) -> MockAdapter:
    return orchestrator.adapter_manager.get_adapter()  # type: ignore[return-value]


@pytest.fixture
def registry(orchestrator: ServiceOrchestrator) -> ToolRegistry:
    reg = ToolRegistry()
    register_tools(reg, orchestrator)
    return reg
