"""Core tool abstractions: BaseTool, ToolMetadata and ToolDescriptor.

A tool is a named, schema-validated operation exposed at the protocol
boundary. Subclasses declare `metadata` and `params_schema` and implement
`execute`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from fulfillment_mcp.foundation.validation import SchemaValidator

if TYPE_CHECKING:
    from fulfillment_mcp.foundation.errors import OperationResult

TOOL_NAME_PATTERN = r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$"


class ToolMetadata(BaseModel):
    """Metadata describing a tool.

    Attributes:
        name: Unique kebab-case identifier (e.g. "get-orders")
        description: What the tool does, shown to clients for selection
        category: Grouping used by the registry's category view
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=TOOL_NAME_PATTERN)
    description: str = Field(..., min_length=10)
    category: str = Field(default="Other")


class ToolDescriptor(BaseModel):
    """Immutable `{name, description, inputSchema}` tuple listed to clients."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., pattern=TOOL_NAME_PATTERN)
    description: str
    input_schema: dict[str, Any] = Field(..., alias="inputSchema")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


TParams = TypeVar("TParams", bound=BaseModel)

_validator = SchemaValidator()


class BaseTool(ABC, Generic[TParams]):
    """Abstract base class for all tools.

    Example:
        >>> class GetOrdersTool(BaseTool[GetOrdersInput]):
        ...     metadata = ToolMetadata(name="get-orders", description="Retrieve orders by filter")
        ...     params_schema = GetOrdersInput
        ...
        ...     async def execute(self, params: GetOrdersInput) -> OperationResult:
        ...         return await self.orchestrator.get_orders(params)
    """

    metadata: ClassVar[ToolMetadata]
    params_schema: ClassVar[type[BaseModel]]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def category(self) -> str:
        return self.metadata.category

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON schema for params; top-level type is always "object"."""
        schema = self.params_schema.model_json_schema(by_alias=True)
        schema["type"] = "object"
        return schema

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(name=self.name, description=self.description, input_schema=self.input_schema)

    def validate_input(self, params: object) -> TParams:
        """Validate raw params; raises ValidationError."""
        return _validator.validate(params, self.params_schema)  # type: ignore[return-value]

    @abstractmethod
    async def execute(self, params: TParams) -> OperationResult:
        """Run the tool with validated params."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
