"""MCP protocol integration."""

from .server import FulfillmentServer, error_response, result_response

__all__ = ["FulfillmentServer", "error_response", "result_response"]
