"""Run the fulfillment MCP server over stdio.

Configuration comes from ``FULFILLMENT_*`` environment variables or a
``.env`` file; see ServerSettings. Logs go to stderr so stdout stays a
clean protocol channel.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from fulfillment_mcp.ext.mcp import FulfillmentServer
from fulfillment_mcp.foundation.config import ServerSettings, get_settings
from fulfillment_mcp.foundation.errors import ConfigurationError
from fulfillment_mcp.foundation.registry import ToolRegistry
from fulfillment_mcp.runtime.observability import configure_logging, log_context
from fulfillment_mcp.services import ServiceOrchestrator
from fulfillment_mcp.tools import register_tools

logger = logging.getLogger("fulfillment_mcp")


async def run(settings: ServerSettings) -> None:
    orchestrator = ServiceOrchestrator.from_settings(settings)
    await orchestrator.initialize(settings.adapter)
    try:
        registry = ToolRegistry()
        register_tools(registry, orchestrator)
        server = FulfillmentServer(
            registry,
            orchestrator.timeout_guard,
            name=settings.server.name,
            version=settings.server.version,
        )
        await server.serve_stdio()
    finally:
        await orchestrator.cleanup()


def main() -> int:
    try:
        settings = get_settings()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return 2

    configure_logging(settings.logging.format, settings.logging.level)
    with log_context(server=settings.server.name, environment=settings.server.environment):
        logger.info(f"Starting {settings.server.name} v{settings.server.version} (adapter: {settings.adapter.key})")
        try:
            asyncio.run(run(settings))
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        except ConfigurationError as e:
            logger.error(f"Startup failed: {e.message}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
