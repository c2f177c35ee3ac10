"""Execution repository for data access."""

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.pagination import Page, paginate
from app.models.execution import SUMMARY_COUNTERS, Execution


class ExecutionRepository:
    """Repository for Execution model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, execution_id: UUID) -> Execution | None:
        return self.db.query(Execution).filter(Execution.id == execution_id).first()

    def get_by_integration(
        self, integration_id: UUID, page: int = 1, limit: int = 10
    ) -> Page[Execution]:
        """Get one page of an integration's executions, newest first."""
        query = (
            self.db.query(Execution)
            .filter(Execution.integration_id == integration_id)
            .order_by(Execution.start_time.desc())
        )
        return paginate(query, page, limit)

    def get_recent(self, limit: int = 20) -> list[Execution]:
        return self.db.query(Execution).order_by(Execution.start_time.desc()).limit(limit).all()

    def get_latest_for_integration(self, integration_id: UUID) -> Execution | None:
        """Execution of an integration with the most recent transition.

        A finished run counts from its end time, a running one from its start.
        """
        return (
            self.db.query(Execution)
            .filter(Execution.integration_id == integration_id)
            .order_by(
                func.coalesce(Execution.end_time, Execution.start_time).desc(),
                Execution.start_time.desc(),
            )
            .first()
        )

    def create(self, values: dict[str, Any]) -> Execution:
        execution = Execution(**values)
        self.db.add(execution)
        self.db.commit()
        self.db.refresh(execution)
        return execution

    def save(self, execution: Execution) -> Execution:
        self.db.commit()
        self.db.refresh(execution)
        return execution

    def increment_counter(self, execution: Execution, task_status: str) -> bool:
        """Atomically bump the summary counter for a task outcome.

        Returns False when the outcome has no counter (pending, running).
        """
        column_name = SUMMARY_COUNTERS.get(task_status)
        if column_name is None:
            return False
        column = getattr(Execution, column_name)
        self.db.query(Execution).filter(Execution.id == execution.id).update(
            {column: column + 1}, synchronize_session=False
        )
        self.db.commit()
        self.db.refresh(execution)
        return True
