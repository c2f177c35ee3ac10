"""Execution model: one recorded run of an integration."""

from datetime import timedelta
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, event

from app.core.database import Base
from app.models.shared import UUIDType, as_utc, generate_uuid, utc_now


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    WARNING = "warning"
    CANCELLED = "cancelled"


class ExecutionType(str, Enum):
    SCHEDULED = "scheduled"
    MANUAL = "manual"
    API_TRIGGERED = "api-triggered"


# pending -> running -> completed | failed | warning
#                    -> cancelled (only from pending or running)
TERMINAL_EXECUTION_STATUSES = frozenset(
    {
        ExecutionStatus.COMPLETED.value,
        ExecutionStatus.FAILED.value,
        ExecutionStatus.WARNING.value,
        ExecutionStatus.CANCELLED.value,
    }
)
CANCELLABLE_EXECUTION_STATUSES = frozenset(
    {ExecutionStatus.PENDING.value, ExecutionStatus.RUNNING.value}
)
COMPLETION_STATUSES = frozenset(
    {
        ExecutionStatus.COMPLETED.value,
        ExecutionStatus.FAILED.value,
        ExecutionStatus.WARNING.value,
    }
)

# Task outcome -> summary counter column
SUMMARY_COUNTERS = {
    "completed": "completed_tasks",
    "failed": "failed_tasks",
    "skipped": "skipped_tasks",
    "warning": "warning_tasks",
}


class Execution(Base):
    """Execution model.

    The summary counters are best-effort telemetry: ``total_tasks`` is captured
    once at start and is not required to equal the sum of the other counters.
    """

    __tablename__ = "executions"
    __table_args__ = (Index("ix_executions_integration_start", "integration_id", "start_time"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    integration_id = Column(UUIDType, nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    end_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        String(20), nullable=False, default=ExecutionStatus.PENDING.value, index=True
    )
    execution_type = Column(
        String(20), nullable=False, default=ExecutionType.SCHEDULED.value, index=True
    )
    triggered_by = Column(String(255), nullable=False, default="system")

    total_tasks = Column(Integer, nullable=False, default=0)
    completed_tasks = Column(Integer, nullable=False, default=0)
    failed_tasks = Column(Integer, nullable=False, default=0)
    skipped_tasks = Column(Integer, nullable=False, default=0)
    warning_tasks = Column(Integer, nullable=False, default=0)

    duration = Column(Integer, nullable=False, default=0)  # milliseconds
    result_data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_EXECUTION_STATUSES

    @property
    def summary(self) -> dict[str, Any]:
        return {
            "total_tasks": self.total_tasks or 0,
            "completed_tasks": self.completed_tasks or 0,
            "failed_tasks": self.failed_tasks or 0,
            "skipped_tasks": self.skipped_tasks or 0,
            "warning_tasks": self.warning_tasks or 0,
        }

    def compute_duration(self) -> int | None:
        """Milliseconds between start and end, or None while either is unset."""
        start = as_utc(self.start_time)
        end = as_utc(self.end_time)
        if start is None or end is None:
            return None
        return (end - start) // timedelta(milliseconds=1)


@event.listens_for(Execution, "before_insert")
@event.listens_for(Execution, "before_update")
def _sync_duration(mapper: Any, connection: Any, target: Execution) -> None:
    duration = target.compute_duration()
    if duration is not None:
        target.duration = duration
