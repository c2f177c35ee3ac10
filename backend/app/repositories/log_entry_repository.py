"""Log entry repository for data access."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.pagination import Page, paginate
from app.models.log_entry import LogEntry, LogLevel
from app.schemas.log_entry import LogEntryCreate


class LogEntryRepository:
    """Repository for LogEntry model."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: LogEntryCreate) -> LogEntry:
        entry = LogEntry(**data.model_dump(mode="json"))
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def get_all(
        self,
        execution_id: UUID | None = None,
        task_id: UUID | None = None,
        integration_id: UUID | None = None,
        level: str | None = None,
        search: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        sort_order: str = "asc",
        page: int = 1,
        limit: int = 100,
    ) -> Page[LogEntry]:
        """Get one page of log entries, ordered by timestamp."""
        query = self.db.query(LogEntry)
        if execution_id is not None:
            query = query.filter(LogEntry.execution_id == execution_id)
        if task_id is not None:
            query = query.filter(LogEntry.task_id == task_id)
        if integration_id is not None:
            query = query.filter(LogEntry.integration_id == integration_id)
        if level is not None:
            query = query.filter(LogEntry.level == level)
        if search:
            query = query.filter(
                or_(
                    LogEntry.message.icontains(search, autoescape=True),
                    LogEntry.details["message"].as_string().icontains(search, autoescape=True),
                )
            )
        if start_date is not None:
            query = query.filter(LogEntry.timestamp >= start_date)
        if end_date is not None:
            query = query.filter(LogEntry.timestamp <= end_date)

        if sort_order == "desc":
            query = query.order_by(LogEntry.timestamp.desc(), LogEntry.created_at.desc())
        else:
            query = query.order_by(LogEntry.timestamp.asc(), LogEntry.created_at.asc())
        return paginate(query, page, limit)

    def get_recent_errors(self, integration_id: UUID, limit: int = 50) -> list[LogEntry]:
        return (
            self.db.query(LogEntry)
            .filter(
                LogEntry.integration_id == integration_id,
                LogEntry.level == LogLevel.ERROR.value,
            )
            .order_by(LogEntry.timestamp.desc())
            .limit(limit)
            .all()
        )

    def count_by_level(self, integration_id: UUID) -> dict[str, int]:
        rows = (
            self.db.query(LogEntry.level, func.count(LogEntry.id))
            .filter(LogEntry.integration_id == integration_id)
            .group_by(LogEntry.level)
            .all()
        )
        return {level: count for level, count in rows}

    def delete_older_than(self, integration_id: UUID, cutoff: datetime) -> int:
        """Delete the integration's entries stamped before ``cutoff``."""
        deleted = (
            self.db.query(LogEntry)
            .filter(LogEntry.integration_id == integration_id, LogEntry.timestamp < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def delete_by_integration(self, integration_id: UUID) -> int:
        deleted = (
            self.db.query(LogEntry)
            .filter(LogEntry.integration_id == integration_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
