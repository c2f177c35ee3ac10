"""Response envelope and base model shared by every resource schema."""

from typing import Any, Generic, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, JsonValue
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

# Opaque, schema-less documents (config, resultData, details, context)
JsonDocument: TypeAlias = dict[str, JsonValue]


class CamelModel(BaseModel):
    """Exposes snake_case attributes as camelCase JSON; accepts either on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class ApiResponse(BaseModel, Generic[DataT]):
    status: str = "success"
    message: str
    data: DataT


class PaginatedResponse(BaseModel, Generic[DataT]):
    status: str = "success"
    message: str
    data: list[DataT]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    status: str = "success"
    message: str


def reject_explicit_nulls(model: BaseModel, fields: tuple[str, ...]) -> None:
    """Raise if a partial update sets a required column to null."""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            msg = f"{to_camel(name)} cannot be null"
            raise ValueError(msg)


def dedupe(values: list[Any]) -> list[Any]:
    """Drop repeated and empty entries, keeping first-seen order."""
    seen: list[Any] = []
    for value in values:
        if value == "" or value in seen:
            continue
        seen.append(value)
    return seen
