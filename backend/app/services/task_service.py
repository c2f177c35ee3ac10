"""Task graph manager: ordered, dependency-linked steps of an integration."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, RequestValidationFailed
from app.models.task import Task, TaskStatus
from app.repositories.task_repository import TaskRepository
from app.schemas.task import TaskCreate, TaskOrderItem, TaskUpdate
from app.services.integration_service import IntegrationService

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task business logic.

    Keeps ``order`` dense and zero-based within each integration: new tasks are
    appended, and deleting a task shifts the ones after it down by one.
    """

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.integration_service = IntegrationService(db)

    def create(self, data: TaskCreate) -> Task:
        self.integration_service.get(data.integration_id)
        self._check_dependencies(data.integration_id, data.depends_on)

        values = data.model_dump(mode="json")
        if data.order is None:
            last_order = self.task_repo.max_order(data.integration_id)
            values["order"] = 0 if last_order is None else last_order + 1

        task = self.task_repo.create(values)
        logger.info(
            "Created task %s for integration %s at order %d",
            task.id,
            task.integration_id,
            task.order,
        )
        return task

    def get(self, task_id: UUID) -> Task:
        task = self.task_repo.get_by_id(task_id)
        if not task:
            raise NotFoundError("Task", task_id)
        return task

    def list_by_integration(self, integration_id: UUID) -> list[Task]:
        self.integration_service.get(integration_id)
        return self.task_repo.get_by_integration(integration_id)

    def update(self, task_id: UUID, data: TaskUpdate) -> Task:
        task = self.get(task_id)
        if data.depends_on is not None:
            if task_id in data.depends_on:
                raise RequestValidationFailed(
                    "Validation error",
                    errors=[{"field": "dependsOn", "message": "A task cannot depend on itself"}],
                )
            self._check_dependencies(task.integration_id, data.depends_on)
        values = data.model_dump(mode="json", exclude_unset=True)
        if data.retry_strategy is not None:
            # Replace the whole strategy so omitted keys fall back to defaults
            values["retry_strategy"] = data.retry_strategy.model_dump()
        return self.task_repo.update(task, values)

    def delete(self, task_id: UUID) -> None:
        task = self.get(task_id)
        integration_id = task.integration_id
        shifted = self.task_repo.delete_and_compact(task)
        logger.info(
            "Deleted task %s of integration %s, shifted %d following task(s)",
            task_id,
            integration_id,
            shifted,
        )

    def reorder(self, items: list[TaskOrderItem]) -> list[Task]:
        """Apply each ``(taskId, newOrder)`` pair; unknown task ids are skipped."""
        new_orders = {item.task_id: item.new_order for item in items}
        tasks = self.task_repo.set_orders(new_orders)
        skipped = set(new_orders) - {task.id for task in tasks}
        if skipped:
            logger.warning(
                "Skipped %d unknown task id(s) during reorder: %s",
                len(skipped),
                ", ".join(sorted(str(task_id) for task_id in skipped)),
            )
        return tasks

    def set_status(self, task_id: UUID, status: TaskStatus) -> Task:
        # Any transition is allowed; the runner owns task state.
        task = self.get(task_id)
        return self.task_repo.update(task, {"status": status.value})

    def _check_dependencies(self, integration_id: UUID, depends_on: list[UUID]) -> None:
        if not depends_on:
            return
        known = self.task_repo.existing_ids(integration_id, depends_on)
        missing = [task_id for task_id in depends_on if task_id not in known]
        if missing:
            raise RequestValidationFailed(
                "Validation error",
                errors=[
                    {
                        "field": "dependsOn",
                        "message": "Unknown task id(s) for this integration: "
                        + ", ".join(str(task_id) for task_id in missing),
                    }
                ],
            )
