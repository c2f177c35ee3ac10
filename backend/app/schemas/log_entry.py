from datetime import datetime
from uuid import UUID

from pydantic import Field, JsonValue

from app.models.log_entry import LogLevel
from app.schemas.common import CamelModel, JsonDocument


class LogEntryCreate(CamelModel):
    task_id: UUID | None = None
    execution_id: UUID
    integration_id: UUID
    level: LogLevel = LogLevel.INFO
    message: str = Field(..., min_length=1)
    details: JsonValue = None
    source: str = Field(default="system", max_length=255)
    context: JsonDocument = Field(default_factory=dict)


class LogEntryResponse(CamelModel):
    id: UUID
    task_id: UUID | None = None
    execution_id: UUID
    integration_id: UUID
    timestamp: datetime
    level: str
    message: str
    details: JsonValue = None
    source: str
    context: JsonDocument


class LogLevelDistribution(CamelModel):
    debug: int = 0
    info: int = 0
    warning: int = 0
    error: int = 0
