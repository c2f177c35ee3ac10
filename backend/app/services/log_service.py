"""Log recorder: append-only execution logs and their queries."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.pagination import Page
from app.models.log_entry import LogEntry, LogLevel
from app.models.shared import as_utc
from app.repositories.log_entry_repository import LogEntryRepository
from app.schemas.log_entry import LogEntryCreate

logger = logging.getLogger(__name__)


class LogService:
    """Service for log entry queries and housekeeping."""

    def __init__(self, db: Session):
        self.db = db
        self.log_repo = LogEntryRepository(db)

    def create(self, data: LogEntryCreate) -> LogEntry:
        return self.log_repo.create(data)

    def list_by_execution(
        self,
        execution_id: UUID,
        task_id: UUID | None = None,
        level: str | None = None,
        search: str | None = None,
        sort_order: str = "asc",
        page: int = 1,
        limit: int = 100,
    ) -> Page[LogEntry]:
        """An execution's log, oldest first unless ``sort_order`` is desc."""
        return self.log_repo.get_all(
            execution_id=execution_id,
            task_id=task_id,
            level=level,
            search=search,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

    def list_by_task(
        self,
        task_id: UUID,
        execution_id: UUID | None = None,
        level: str | None = None,
        search: str | None = None,
        sort_order: str = "asc",
        page: int = 1,
        limit: int = 100,
    ) -> Page[LogEntry]:
        return self.log_repo.get_all(
            task_id=task_id,
            execution_id=execution_id,
            level=level,
            search=search,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

    def list_by_integration(
        self,
        integration_id: UUID,
        execution_id: UUID | None = None,
        task_id: UUID | None = None,
        level: str | None = None,
        search: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 100,
    ) -> Page[LogEntry]:
        """An integration's log, newest first unless ``sort_order`` is asc."""
        return self.log_repo.get_all(
            integration_id=integration_id,
            execution_id=execution_id,
            task_id=task_id,
            level=level,
            search=search,
            start_date=as_utc(start_date),
            end_date=as_utc(end_date),
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

    def recent_errors(self, integration_id: UUID, limit: int = 50) -> list[LogEntry]:
        return self.log_repo.get_recent_errors(integration_id, limit=limit)

    def level_distribution(self, integration_id: UUID) -> dict[str, int]:
        """Entry counts for every level, zero-filled."""
        distribution = {level.value: 0 for level in LogLevel}
        for level, count in self.log_repo.count_by_level(integration_id).items():
            if level in distribution:
                distribution[level] = count
        return distribution

    def delete_older_than(self, integration_id: UUID, cutoff: datetime) -> int:
        deleted = self.log_repo.delete_older_than(integration_id, as_utc(cutoff))
        if deleted:
            logger.info(
                "Purged %d log entries of integration %s older than %s",
                deleted,
                integration_id,
                cutoff.isoformat(),
            )
        return deleted

    def clear_for_integration(self, integration_id: UUID) -> int:
        deleted = self.log_repo.delete_by_integration(integration_id)
        logger.info("Cleared %d log entries of integration %s", deleted, integration_id)
        return deleted
