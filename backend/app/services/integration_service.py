"""Integration registry: CRUD plus status and health bookkeeping."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import DuplicateKeyError, NotFoundError, RequestValidationFailed
from app.core.pagination import Page
from app.models.execution import Execution, ExecutionStatus
from app.models.integration import Integration, IntegrationFrequency, IntegrationStatus
from app.repositories.integration_repository import IntegrationRepository
from app.schemas.integration import IntegrationCreate, IntegrationUpdate

logger = logging.getLogger(__name__)


def _check_custom_frequency(current: Integration, data: IntegrationUpdate) -> None:
    """customFrequency must stay set while the merged frequency is custom."""
    patch = data.model_fields_set
    frequency = data.frequency.value if "frequency" in patch else current.frequency
    custom_frequency = (
        data.custom_frequency if "custom_frequency" in patch else current.custom_frequency
    )
    if frequency == IntegrationFrequency.CUSTOM.value and not custom_frequency:
        raise RequestValidationFailed(
            errors=[
                {
                    "field": "customFrequency",
                    "message": 'customFrequency is required when frequency is "custom"',
                }
            ]
        )


def derive_integration_status(current: str, execution_status: str) -> str:
    """Integration status after an execution finishes with ``execution_status``.

    Failures and warnings are sticky until a later successful run; only the
    ``error -> active`` recovery is automatic.
    """
    if execution_status == ExecutionStatus.FAILED.value:
        return IntegrationStatus.ERROR.value
    if execution_status == ExecutionStatus.WARNING.value:
        return IntegrationStatus.WARNING.value
    if (
        execution_status == ExecutionStatus.COMPLETED.value
        and current == IntegrationStatus.ERROR.value
    ):
        return IntegrationStatus.ACTIVE.value
    return current


class IntegrationService:
    """Service for integration business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.integration_repo = IntegrationRepository(db)

    def create(self, data: IntegrationCreate) -> Integration:
        if self.integration_repo.get_by_name(data.name):
            raise DuplicateKeyError("name", data.name)
        integration = self.integration_repo.create(data)
        logger.info("Created integration %s (%s)", integration.id, integration.name)
        return integration

    def get(self, integration_id: UUID) -> Integration:
        integration = self.integration_repo.get_by_id(integration_id)
        if not integration:
            raise NotFoundError("Integration", integration_id)
        return integration

    def list_integrations(
        self,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        integration_type: str | None = None,
        tags: list[str] | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> Page[Integration]:
        return self.integration_repo.get_all(
            page=page,
            limit=limit,
            status=status,
            integration_type=integration_type,
            tags=tags,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def update(self, integration_id: UUID, data: IntegrationUpdate) -> Integration:
        if data.name is not None:
            existing = self.integration_repo.get_by_name(data.name)
            if existing and existing.id != integration_id:
                raise DuplicateKeyError("name", data.name)
        current = self.get(integration_id)
        _check_custom_frequency(current, data)
        integration = self.integration_repo.update(integration_id, data)
        if not integration:
            raise NotFoundError("Integration", integration_id)
        return integration

    def delete(self, integration_id: UUID, cascade: bool = False) -> None:
        if not self.integration_repo.delete(integration_id, cascade=cascade):
            raise NotFoundError("Integration", integration_id)
        logger.info("Deleted integration %s (cascade=%s)", integration_id, cascade)

    def set_status(self, integration_id: UUID, status: IntegrationStatus) -> Integration:
        """Admin override of ``status``, independent of execution outcomes."""
        integration = self.get(integration_id)
        integration.status = status.value
        return self.integration_repo.save(integration)

    def stats(self) -> dict:
        """Totals grouped by status, type and frequency."""
        by_status = {status.value: 0 for status in IntegrationStatus}
        for status, count in self.integration_repo.count_grouped_by(Integration.status):
            by_status[status] = count
        return {
            "total": self.integration_repo.count(),
            "by_status": by_status,
            "by_type": [
                {"type": value, "count": count}
                for value, count in self.integration_repo.count_grouped_by(Integration.type)
            ],
            "by_frequency": [
                {"frequency": value, "count": count}
                for value, count in self.integration_repo.count_grouped_by(Integration.frequency)
            ],
        }

    def reconcile_from_execution(self, execution: Execution) -> Integration | None:
        """Copy an execution into its integration's derived fields.

        Status is only derived from finished runs; running and cancelled
        executions leave it unchanged.

        Idempotent: applying it twice for the same execution leaves the
        integration unchanged. Returns None when the integration was deleted.
        """
        integration = self.integration_repo.get_by_id(execution.integration_id)
        if not integration:
            logger.warning(
                "Integration %s not found while reconciling execution %s",
                execution.integration_id,
                execution.id,
            )
            return None

        integration.last_execution_start_time = execution.start_time
        integration.last_execution_end_time = execution.end_time
        integration.last_execution_status = execution.status

        new_status = derive_integration_status(integration.status, execution.status)
        if new_status != integration.status:
            logger.info(
                "Integration %s status %s -> %s after execution %s",
                integration.id,
                integration.status,
                new_status,
                execution.id,
            )
            integration.status = new_status

        return self.integration_repo.save(integration)
