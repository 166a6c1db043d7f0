"""MCP protocol boundary for the fulfillment tool registry.

`FulfillmentServer` is transport-independent: `list_tools` and `call_tool`
return plain dicts, and `serve_stdio` glues them onto the official MCP
SDK's low-level server.

Error handling at the boundary:
- Unknown tool: ProtocolError -32601, sent as a JSON-RPC error
- Malformed arguments: ProtocolError -32602, sent as a JSON-RPC error
- Business failures and ``success: false`` results: a tool response with
  ``isError: true`` carrying the normalized error

Requires: pip install fulfillment-mcp[mcp] (for serve_stdio)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fulfillment_mcp.foundation.errors import (
    FulfillmentError,
    OperationResult,
    ProtocolError,
    normalize_error,
)

if TYPE_CHECKING:
    from fulfillment_mcp.foundation.registry import ToolRegistry
    from fulfillment_mcp.runtime.timeout import TimeoutGuard

logger = logging.getLogger("fulfillment_mcp.server")

ToolResponse = dict[str, Any]


def _text_response(payload: object, *, is_error: bool) -> ToolResponse:
    return {
        "content": [{"type": "text", "text": json.dumps(payload, indent=2, default=str)}],
        "isError": is_error,
    }


def result_response(result: OperationResult) -> ToolResponse:
    """Tool response for a settled result; failures are flagged isError."""
    return _text_response(result.to_dict(), is_error=not result.success)


def error_response(exc: BaseException) -> ToolResponse:
    return result_response(OperationResult.fail(normalize_error(exc)))


class FulfillmentServer:
    """Protocol-facing wrapper around a ToolRegistry.

    Args:
        registry: Tools to expose
        timeout_guard: Supplies the outer "request" budget for each call
        name: Server name reported during initialization
        version: Server version reported during initialization

    Example:
        >>> server = FulfillmentServer(registry, orchestrator.timeout_guard)
        >>> await server.call_tool("get-orders", {"statuses": ["new"]})
        {'content': [{'type': 'text', 'text': '...'}], 'isError': False}
    """

    __slots__ = ("_registry", "_guard", "_name", "_version")

    def __init__(
        self,
        registry: ToolRegistry,
        timeout_guard: TimeoutGuard,
        *,
        name: str = "fulfillment-mcp",
        version: str = "0.0.0",
    ) -> None:
        self._registry = registry
        self._guard = timeout_guard
        self._name = name
        self._version = version

    @property
    def name(self) -> str:
        return self._name

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def list_tools(self) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self._registry.list()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Dispatch one tool call under the request budget.

        Raises:
            ProtocolError: Unknown tool (-32601) or invalid arguments (-32602)
        """
        logger.debug(f"tools/call {name}")
        try:
            result = await self._guard.with_timeout(
                lambda: self._registry.execute(name, arguments or {}), "request", operation=name
            )
        except ProtocolError:
            raise
        except FulfillmentError as e:
            if e.is_protocol_error:
                logger.info(f"Rejected arguments for {name}: {e.message}")
                raise ProtocolError(ProtocolError.INVALID_PARAMS, e.message, normalize_error(e).model_dump(mode="json")) from e
            logger.error(f"Tool execution failed: {name}: {e.message}")
            return error_response(e)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return error_response(e)

        if not result.success:
            logger.info(f"Tool {name} returned failure: {result.error.render() if result.error else ''}")
        return result_response(result)

    async def serve_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        try:
            import mcp.types as types
            from mcp.server.lowlevel import Server
            from mcp.server.stdio import stdio_server
            from mcp.shared.exceptions import McpError
        except ImportError as e:
            raise ImportError(
                "MCP integration requires the mcp SDK. "
                "Install with: pip install fulfillment-mcp[mcp]"
            ) from e

        server: Server[Any, Any] = Server(self._name, version=self._version)

        @server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return [
                types.Tool(name=t["name"], description=t["description"], inputSchema=t["inputSchema"])
                for t in self.list_tools()
            ]

        # Registered directly so ProtocolError reaches the client as a JSON-RPC error
        # instead of being folded into an isError tool result.
        async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
            try:
                response = await self.call_tool(request.params.name, request.params.arguments)
            except ProtocolError as e:
                raise McpError(types.ErrorData(code=e.code, message=e.message, data=e.data)) from e
            return types.ServerResult(types.CallToolResult.model_validate(response))

        server.request_handlers[types.CallToolRequest] = _call_tool

        logger.info(f"Serving {len(self._registry)} tools over stdio as {self._name} v{self._version}")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
