"""Task repository for data access."""

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.task import Task


class TaskRepository:
    """Repository for Task model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, task_id: UUID) -> Task | None:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def get_by_integration(self, integration_id: UUID) -> list[Task]:
        """Get all tasks of an integration, in execution order."""
        return (
            self.db.query(Task)
            .filter(Task.integration_id == integration_id)
            .order_by(Task.order.asc(), Task.created_at.asc())
            .all()
        )

    def count_by_integration(self, integration_id: UUID) -> int:
        return (
            self.db.query(func.count(Task.id)).filter(Task.integration_id == integration_id).scalar()
            or 0
        )

    def max_order(self, integration_id: UUID) -> int | None:
        """Highest ``order`` among the integration's tasks, or None if it has none."""
        return (
            self.db.query(func.max(Task.order))
            .filter(Task.integration_id == integration_id)
            .scalar()
        )

    def existing_ids(self, integration_id: UUID, task_ids: list[UUID]) -> set[UUID]:
        """Return the subset of ``task_ids`` that belong to the integration."""
        if not task_ids:
            return set()
        rows = (
            self.db.query(Task.id)
            .filter(Task.integration_id == integration_id, Task.id.in_(task_ids))
            .all()
        )
        return {row[0] for row in rows}

    def create(self, values: dict[str, Any]) -> Task:
        task = Task(**values)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update(self, task: Task, values: dict[str, Any]) -> Task:
        for key, value in values.items():
            setattr(task, key, value)
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_and_compact(self, task: Task) -> int:
        """Delete a task and close the gap it leaves in its integration's ordering.

        Both statements run in one transaction. Returns the number of shifted tasks.
        """
        integration_id = task.integration_id
        removed_order = task.order
        self.db.delete(task)
        self.db.flush()
        shifted = (
            self.db.query(Task)
            .filter(Task.integration_id == integration_id, Task.order > removed_order)
            .update({Task.order: Task.order - 1}, synchronize_session=False)
        )
        self.db.commit()
        return shifted

    def set_orders(self, new_orders: dict[UUID, int]) -> list[Task]:
        """Apply ``{task_id: order}`` in a single commit, skipping unknown ids."""
        if not new_orders:
            return []
        tasks = self.db.query(Task).filter(Task.id.in_(list(new_orders))).all()
        for task in tasks:
            task.order = new_orders[task.id]
        self.db.commit()
        for task in tasks:
            self.db.refresh(task)
        return sorted(tasks, key=lambda t: (str(t.integration_id), t.order))
