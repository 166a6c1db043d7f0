"""Discriminated success/failure result returned by service operations."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import NormalizedError


class OperationResult(BaseModel):
    """`{success: true, **payload}` or `{success: false, error, **extra}`.

    Payload keys (order, orders, fulfillment, ...) are kept as extra fields so
    adapters can return whatever their operation produces.

    Example:
        >>> OperationResult.ok(order={"id": "ord_1"}).model_dump()
        {'success': True, 'error': None, 'order': {'id': 'ord_1'}}
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    success: bool
    error: NormalizedError | None = None

    @model_validator(mode="after")
    def _check_discriminant(self) -> Self:
        if self.success and self.error is not None:
            raise ValueError("successful result cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("failed result requires an error")
        return self

    @classmethod
    def ok(cls, **payload: object) -> Self:
        return cls(success=True, **payload)

    @classmethod
    def fail(cls, error: NormalizedError, **extra: object) -> Self:
        return cls(success=False, error=error, **extra)

    @property
    def payload(self) -> dict[str, object]:
        """Extra fields only."""
        return dict(self.__pydantic_extra__ or {})

    def to_dict(self) -> dict[str, object]:
        """JSON-ready dict; drops `error` on success."""
        data = self.model_dump(mode="json", by_alias=True)
        if self.success:
            data.pop("error", None)
        return data
