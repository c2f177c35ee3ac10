import logging
from datetime import timedelta
from typing import Any

from arq import cron
from arq.connections import RedisSettings

from app.core.config import settings
from app.core.database import SessionLocal
from app.models.integration import Integration
from app.models.shared import as_utc, utc_now
from app.repositories.execution_repository import ExecutionRepository
from app.repositories.integration_repository import IntegrationRepository
from app.services.integration_service import IntegrationService
from app.services.log_service import LogService

logger = logging.getLogger(__name__)

# Redis connection settings
redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


def _integration_batches(db: Any) -> Any:
    """Yield integration ids in keyset-paginated batches."""
    repo = IntegrationRepository(db)
    after = None
    while True:
        ids = repo.get_ids(after=after, limit=settings.RECONCILE_BATCH_SIZE)
        if not ids:
            return
        yield ids
        after = ids[-1]


async def purge_old_logs_task(ctx: dict[str, Any]) -> int:
    """Background task: delete log entries older than the retention window.

    Runs daily at 03:00.
    """
    db = SessionLocal()
    try:
        cutoff = utc_now() - timedelta(days=settings.LOG_RETENTION_DAYS)
        service = LogService(db)
        total = 0
        for ids in _integration_batches(db):
            for integration_id in ids:
                total += service.delete_older_than(integration_id, cutoff)
        if total > 0:
            logger.info("Purged %d log entries older than %s", total, cutoff.isoformat())
        return total
    finally:
        db.close()


def _is_stale(integration: Integration, execution: Any) -> bool:
    return (
        integration.last_execution_status != execution.status
        or as_utc(integration.last_execution_start_time) != as_utc(execution.start_time)
        or as_utc(integration.last_execution_end_time) != as_utc(execution.end_time)
    )


async def reconcile_integrations_task(ctx: dict[str, Any]) -> int:
    """Background task: repair integrations whose ``lastExecution`` lags their executions.

    Covers executions whose completion committed but whose integration update
    did not. Runs every 15 minutes.
    """
    db = SessionLocal()
    try:
        integration_repo = IntegrationRepository(db)
        execution_repo = ExecutionRepository(db)
        service = IntegrationService(db)
        count = 0
        for ids in _integration_batches(db):
            for integration_id in ids:
                execution = execution_repo.get_latest_for_integration(integration_id)
                if execution is None:
                    continue
                integration = integration_repo.get_by_id(integration_id)
                if integration is None or not _is_stale(integration, execution):
                    continue
                logger.warning(
                    "Integration %s out of date with execution %s, reconciling",
                    integration_id,
                    execution.id,
                )
                service.reconcile_from_execution(execution)
                count += 1
        if count > 0:
            logger.info("Reconciled %d integrations", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    """arq worker settings."""

    functions = [
        purge_old_logs_task,
        reconcile_integrations_task,
    ]
    cron_jobs = [
        cron(purge_old_logs_task, hour={3}, minute={0}),
        cron(reconcile_integrations_task, minute={0, 15, 30, 45}),
    ]
    redis_settings = redis_settings
