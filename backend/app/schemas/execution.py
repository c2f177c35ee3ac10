from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from app.models.execution import ExecutionType
from app.models.task import TaskStatus
from app.schemas.common import CamelModel, JsonDocument
from app.schemas.integration import IntegrationBrief


class ExecutionStart(CamelModel):
    execution_type: ExecutionType = ExecutionType.MANUAL
    triggered_by: str = Field(default="system", min_length=1, max_length=255)


class ExecutionComplete(CamelModel):
    status: Literal["completed", "failed", "warning"]
    result_data: JsonDocument = Field(default_factory=dict)


class TaskOutcome(CamelModel):
    task_status: TaskStatus


class ExecutionSummary(CamelModel):
    total_tasks: int = 0
    completed_tasks: int = 0
    failed_tasks: int = 0
    skipped_tasks: int = 0
    warning_tasks: int = 0


class ExecutionResponse(CamelModel):
    id: UUID
    integration_id: UUID
    start_time: datetime
    end_time: datetime | None = None
    status: str
    execution_type: str
    triggered_by: str
    summary: ExecutionSummary
    duration: int
    result_data: JsonDocument
    created_at: datetime
    updated_at: datetime


class ExecutionDetailResponse(ExecutionResponse):
    """Execution with its owning integration; ``integration`` is null once it is deleted."""

    integration: IntegrationBrief | None = None
