from app.repositories.execution_repository import ExecutionRepository
from app.repositories.integration_repository import IntegrationRepository
from app.repositories.log_entry_repository import LogEntryRepository
from app.repositories.task_repository import TaskRepository

__all__ = [
    "ExecutionRepository",
    "IntegrationRepository",
    "LogEntryRepository",
    "TaskRepository",
]
