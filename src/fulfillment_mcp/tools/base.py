"""Base class for tools that delegate to the service orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fulfillment_mcp.foundation.core import BaseTool, TParams

if TYPE_CHECKING:
    from fulfillment_mcp.services import ServiceOrchestrator


class OrchestratorTool(BaseTool[TParams]):
    """A tool bound to one ServiceOrchestrator."""

    def __init__(self, orchestrator: ServiceOrchestrator) -> None:
        self.orchestrator = orchestrator
