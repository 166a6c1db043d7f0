from .base import TOOL_NAME_PATTERN, BaseTool, ToolDescriptor, ToolMetadata, TParams

__all__ = ["TOOL_NAME_PATTERN", "BaseTool", "ToolDescriptor", "ToolMetadata", "TParams"]
