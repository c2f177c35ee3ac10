from app.models.execution import (
    CANCELLABLE_EXECUTION_STATUSES,
    COMPLETION_STATUSES,
    TERMINAL_EXECUTION_STATUSES,
    Execution,
    ExecutionStatus,
    ExecutionType,
)
from app.models.integration import (
    Integration,
    IntegrationFrequency,
    IntegrationStatus,
    IntegrationType,
)
from app.models.log_entry import LogEntry, LogLevel
from app.models.task import Task, TaskStatus, TaskType

__all__ = [
    "CANCELLABLE_EXECUTION_STATUSES",
    "COMPLETION_STATUSES",
    "Execution",
    "ExecutionStatus",
    "ExecutionType",
    "Integration",
    "IntegrationFrequency",
    "IntegrationStatus",
    "IntegrationType",
    "LogEntry",
    "LogLevel",
    "TERMINAL_EXECUTION_STATUSES",
    "Task",
    "TaskStatus",
    "TaskType",
]
