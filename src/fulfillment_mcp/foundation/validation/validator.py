"""Schema validation glue over pydantic.

Turns untyped input into a typed value, or raises ValidationError with the
failing field and a readable issue list that protocol clients can show
directly.
"""

from __future__ import annotations

from typing import Any, TypeVar, cast

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from fulfillment_mcp.foundation.errors import ValidationError

T = TypeVar("T")

Issue = dict[str, str]


def _loc_to_field(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(p) for p in loc) if loc else "data"


def issues_from(exc: PydanticValidationError) -> list[Issue]:
    """Flatten pydantic errors into {field, message, type} entries."""
    return [
        {"field": _loc_to_field(err["loc"]), "message": err["msg"], "type": err["type"]}
        for err in exc.errors(include_url=False)
    ]


def format_issues(issues: list[Issue]) -> str:
    """Human-readable summary, one issue per line."""
    return "\n".join(f"- {i['field']}: {i['message']}" for i in issues)


class SchemaValidator:
    """Validates values against pydantic models (or any TypeAdapter-able type).

    TypeAdapters are built once per schema and cached.

    Example:
        >>> validator = SchemaValidator()
        >>> validator.validate({"orderId": "o1"}, CancelOrderInput).order_id
        'o1'
    """

    __slots__ = ("_adapters",)

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, schema: type[T]) -> TypeAdapter[T]:
        adapter = self._adapters.get(schema)
        if adapter is None:
            adapter = self._adapters[schema] = TypeAdapter(schema)
        return adapter

    def validate(self, value: object, schema: type[T]) -> T:
        """Validate `value` against `schema`.

        Raises:
            ValidationError: with `field` set to the first failing location
        """
        try:
            return cast(T, self._adapter(schema).validate_python(value))
        except PydanticValidationError as e:
            issues = issues_from(e)
            name = getattr(schema, "__name__", str(schema))
            raise ValidationError(
                f"Invalid input for {name}:\n{format_issues(issues)}",
                field=issues[0]["field"] if issues else None,
                issues=issues,
            ) from e

    def is_valid(self, value: object, schema: type[Any]) -> bool:
        try:
            self.validate(value, schema)
        except ValidationError:
            return False
        return True

    @property
    def cache_size(self) -> int:
        return len(self._adapters)

    def clear_cache(self) -> None:
        self._adapters.clear()


_default = SchemaValidator()


def validate(value: object, schema: type[T]) -> T:
    """Validate with the shared module-level validator."""
    return _default.validate(value, schema)
