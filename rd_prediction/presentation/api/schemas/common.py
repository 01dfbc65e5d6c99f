"""
Shared response schemas.

API payloads use camelCase keys. Models here are declared in snake_case and
the aliases are generated.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases and populated by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope: ``{"success": true, "message"?: str, "data": {...}}``."""

    success: bool = True
    message: str | None = None
    data: DataT | None = None


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class ErrorItem(CamelModel):
    field: str | None = None
    message: str


class ErrorResponse(CamelModel):
    """Error envelope: ``{"success": false, "message": str, "errors"?: [...]}``."""

    success: bool = False
    message: str
    errors: list[ErrorItem] | None = None
