"""Execution lifecycle: start, complete and cancel runs of an integration.

State machine::

    pending -> running -> completed | failed | warning
                       -> cancelled (only from pending or running)

Finishing an execution is two-phase. The execution's terminal state is
committed first and is the source of truth; the owning integration's
``lastExecution`` and ``status`` are reconciled from it afterwards. If the
second phase fails, ``reconcile_integrations_task`` in the worker repairs the
integration later.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import InvalidStateError, NotFoundError
from app.core.pagination import Page
from app.models.execution import (
    CANCELLABLE_EXECUTION_STATUSES,
    Execution,
    ExecutionStatus,
)
from app.models.integration import Integration
from app.models.shared import utc_now
from app.models.task import TaskStatus
from app.repositories.execution_repository import ExecutionRepository
from app.repositories.integration_repository import IntegrationRepository
from app.repositories.task_repository import TaskRepository
from app.schemas.execution import ExecutionComplete, ExecutionStart
from app.services.integration_service import IntegrationService

logger = logging.getLogger(__name__)


class ExecutionService:
    """Service for execution lifecycle business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.execution_repo = ExecutionRepository(db)
        self.integration_repo = IntegrationRepository(db)
        self.task_repo = TaskRepository(db)
        self.integration_service = IntegrationService(db)

    def start(self, integration_id: UUID, data: ExecutionStart | None = None) -> Execution:
        """Record that a run of the integration has begun.

        ``summary.totalTasks`` is the integration's task count at this moment.
        """
        data = data or ExecutionStart()
        self.integration_service.get(integration_id)

        execution = self.execution_repo.create(
            {
                "integration_id": integration_id,
                "start_time": utc_now(),
                "status": ExecutionStatus.RUNNING.value,
                "execution_type": data.execution_type.value,
                "triggered_by": data.triggered_by,
                "total_tasks": self.task_repo.count_by_integration(integration_id),
            }
        )
        logger.info(
            "Started %s execution %s for integration %s (%d tasks, triggered by %s)",
            execution.execution_type,
            execution.id,
            integration_id,
            execution.total_tasks,
            execution.triggered_by,
        )
        self.integration_service.reconcile_from_execution(execution)
        return execution

    def complete(self, execution_id: UUID, data: ExecutionComplete) -> Execution:
        execution = self.get(execution_id)
        if execution.is_terminal:
            # Terminal executions are overwritten, not rejected.
            logger.warning(
                "Execution %s is already %s; overwriting with %s",
                execution_id,
                execution.status,
                data.status,
            )

        execution.status = data.status
        execution.end_time = utc_now()
        execution.result_data = data.result_data
        self.execution_repo.save(execution)
        logger.info(
            "Execution %s finished with status %s in %d ms",
            execution_id,
            execution.status,
            execution.duration,
        )

        self._reconcile(execution)
        return execution

    def cancel(self, execution_id: UUID) -> Execution:
        execution = self.get(execution_id)
        if execution.status not in CANCELLABLE_EXECUTION_STATUSES:
            raise InvalidStateError(f"Cannot cancel execution with status {execution.status}")

        execution.status = ExecutionStatus.CANCELLED.value
        execution.end_time = utc_now()
        self.execution_repo.save(execution)
        logger.info("Execution %s cancelled after %d ms", execution_id, execution.duration)

        self._reconcile(execution)
        return execution

    def get(self, execution_id: UUID) -> Execution:
        execution = self.execution_repo.get_by_id(execution_id)
        if not execution:
            raise NotFoundError("Execution", execution_id)
        return execution

    def get_with_integration(self, execution_id: UUID) -> tuple[Execution, Integration | None]:
        execution = self.get(execution_id)
        return execution, self.integration_repo.get_by_id(execution.integration_id)

    def list_by_integration(
        self, integration_id: UUID, page: int = 1, limit: int = 10
    ) -> Page[Execution]:
        self.integration_service.get(integration_id)
        return self.execution_repo.get_by_integration(integration_id, page=page, limit=limit)

    def recent(self, limit: int = 20) -> list[tuple[Execution, Integration | None]]:
        """Newest executions across all integrations, each with its integration."""
        executions = self.execution_repo.get_recent(limit)
        integrations = self.integration_repo.get_by_ids(
            {execution.integration_id for execution in executions}
        )
        return [
            (execution, integrations.get(execution.integration_id)) for execution in executions
        ]

    def record_task_outcome(self, execution_id: UUID, task_status: TaskStatus) -> Execution:
        """Count one reported task outcome in the execution summary.

        Outcomes without a counter (pending, running) are accepted and ignored.
        """
        execution = self.get(execution_id)
        if not self.execution_repo.increment_counter(execution, task_status.value):
            logger.debug(
                "Task outcome %s has no summary counter; execution %s unchanged",
                task_status.value,
                execution_id,
            )
        return execution

    def _reconcile(self, execution: Execution) -> None:
        try:
            self.integration_service.reconcile_from_execution(execution)
        except Exception:
            self.db.rollback()
            logger.exception(
                "Failed to update integration %s from execution %s; "
                "it will be reconciled by the worker",
                execution.integration_id,
                execution.id,
            )
            raise
