from .registry import CATEGORY_ORDER, DuplicateToolError, ToolRegistry

__all__ = ["CATEGORY_ORDER", "DuplicateToolError", "ToolRegistry"]
