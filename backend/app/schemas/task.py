from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator, model_validator

from app.models.task import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BACKOFF_MS,
    DEFAULT_TASK_TIMEOUT_MS,
    TaskStatus,
    TaskType,
)
from app.schemas.common import CamelModel, JsonDocument, dedupe, reject_explicit_nulls


class RetryStrategy(CamelModel):
    attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=0)
    backoff: int = Field(default=DEFAULT_RETRY_BACKOFF_MS, ge=1000)  # milliseconds


class TaskCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=3, max_length=100)
    description: str = ""
    integration_id: UUID
    type: TaskType
    status: TaskStatus = TaskStatus.PENDING
    order: int | None = Field(default=None, ge=0)
    depends_on: list[UUID] = Field(default_factory=list)
    config: JsonDocument = Field(default_factory=dict)
    timeout: int = Field(default=DEFAULT_TASK_TIMEOUT_MS, ge=1000)  # milliseconds
    retry_strategy: RetryStrategy = Field(default_factory=RetryStrategy)

    @field_validator("depends_on")
    @classmethod
    def unique_dependencies(cls, value: list[UUID]) -> list[UUID]:
        return dedupe(value)


class TaskUpdate(CamelModel):
    """Partial update. ``integrationId`` is not accepted and is ignored if sent."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = None
    type: TaskType | None = None
    status: TaskStatus | None = None
    order: int | None = Field(default=None, ge=0)
    depends_on: list[UUID] | None = None
    config: JsonDocument | None = None
    timeout: int | None = Field(default=None, ge=1000)
    retry_strategy: RetryStrategy | None = None

    @field_validator("depends_on")
    @classmethod
    def unique_dependencies(cls, value: list[UUID] | None) -> list[UUID] | None:
        return None if value is None else dedupe(value)

    @model_validator(mode="after")
    def validate_patch(self) -> Self:
        if not self.model_fields_set:
            msg = "At least one field must be provided for update"
            raise ValueError(msg)
        reject_explicit_nulls(self, tuple(self.model_fields_set))
        return self


class TaskOrderItem(CamelModel):
    task_id: UUID
    new_order: int = Field(..., ge=0)


class TaskReorder(CamelModel):
    tasks: list[TaskOrderItem] = Field(..., min_length=1)


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


class TaskResponse(CamelModel):
    id: UUID
    integration_id: UUID
    name: str
    description: str
    type: str
    status: str
    order: int
    depends_on: list[UUID]
    config: JsonDocument
    timeout: int
    retry_strategy: RetryStrategy
    created_at: datetime
    updated_at: datetime
