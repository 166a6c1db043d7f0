"""Owns the single active adapter: creation, connection, health, teardown."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from fulfillment_mcp.adapters import AdapterCapabilities, AdapterFactory
from fulfillment_mcp.foundation.errors import ConfigurationError
from fulfillment_mcp.runtime.health import HealthState, HealthStatus

if TYPE_CHECKING:
    from fulfillment_mcp.adapters import FulfillmentAdapter
    from fulfillment_mcp.foundation.config import AdapterSettings

logger = logging.getLogger("fulfillment_mcp.services")


class AdapterManager:
    """Resolves the configured adapter through an AdapterFactory and connects it."""

    __slots__ = ("_factory", "_adapter", "_config")

    def __init__(self, factory: AdapterFactory | None = None) -> None:
        self._factory = factory or AdapterFactory()
        self._adapter: FulfillmentAdapter | None = None
        self._config: AdapterSettings | None = None

    @property
    def factory(self) -> AdapterFactory:
        return self._factory

    @property
    def is_ready(self) -> bool:
        return self._adapter is not None

    async def initialize(self, config: AdapterSettings) -> FulfillmentAdapter:
        """Create and connect the adapter; a previous one is disconnected first."""
        if self._adapter is not None:
            await self.cleanup()
        adapter = self._factory.create(config)
        await adapter.connect()
        self._adapter, self._config = adapter, config
        logger.info(f"Adapter ready: {config.key}")
        return adapter

    def get_adapter(self) -> FulfillmentAdapter:
        if self._adapter is None:
            raise ConfigurationError("Adapter not initialized. Call initialize() first.")
        return self._adapter

    async def check_health(self) -> HealthStatus:
        """Adapter-reported health; a failing probe is reported as unhealthy."""
        if self._adapter is None:
            return HealthStatus(status=HealthState.UNHEALTHY, message="Adapter not initialized")
        start = time.perf_counter()
        try:
            return await self._adapter.health_check()
        except Exception as e:
            logger.error(f"Adapter health check failed: {e}")
            return HealthStatus(
                status=HealthState.UNHEALTHY,
                message=f"Health check failed: {e}",
                details={"error_type": type(e).__name__, "duration_ms": (time.perf_counter() - start) * 1000},
            )

    async def get_capabilities(self) -> AdapterCapabilities:
        return await self.get_adapter().get_capabilities()

    async def cleanup(self) -> None:
        """Disconnect and drop the adapter. Safe to call when not initialized."""
        adapter, config = self._adapter, self._config
        self._adapter = self._config = None
        if adapter is None:
            return
        try:
            await adapter.disconnect()
        finally:
            if config is not None:
                self._factory.forget(config)
        logger.info("Adapter disconnected")
