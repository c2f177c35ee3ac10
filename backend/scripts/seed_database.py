"""Seed the database with sample integrations, tasks, executions and logs.

Safe to run repeatedly: integrations that already exist (by name) are left alone.

    python -m scripts.seed_database
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.core.database import SessionLocal, init_db
from app.models.integration import Integration
from app.schemas.execution import ExecutionComplete, ExecutionStart
from app.schemas.integration import IntegrationCreate
from app.schemas.log_entry import LogEntryCreate
from app.schemas.task import TaskCreate
from app.services.execution_service import ExecutionService
from app.services.integration_service import IntegrationService
from app.services.log_service import LogService
from app.services.task_service import TaskService

logger = logging.getLogger(__name__)

INTEGRATIONS: list[dict[str, Any]] = [
    {
        "name": "Customer API Sync",
        "description": "Synchronise customer records from the partner API",
        "type": "API",
        "source": "https://api.customers.example.com",
        "destination": "Local customer database",
        "status": "active",
        "frequency": "daily",
        "config": {
            "authentication": {
                "type": "oauth2",
                "clientId": "CLIENT_ID",
                "tokenUrl": "https://api.customers.example.com/oauth/token",
            },
            "endpoints": {"customers": "/api/customers", "orders": "/api/orders"},
        },
        "health_score": 95,
        "owner": "Data Team",
        "tags": ["customers", "api", "sync"],
    },
    {
        "name": "Finance ETL",
        "description": "Weekly load of finance ledgers into the warehouse",
        "type": "DATABASE",
        "source": "Oracle Finance DB",
        "destination": "Data Warehouse",
        "status": "active",
        "frequency": "weekly",
        "config": {
            "sourceConnection": {"host": "oracle-finance.example.com", "database": "FINDB"},
            "targetConnection": {"host": "warehouse.example.com", "database": "DWH"},
        },
        "health_score": 100,
        "owner": "Finance Team",
        "tags": ["finance", "etl", "oracle", "data warehouse"],
    },
    {
        "name": "Sales CSV Processing",
        "description": "Parse daily sales CSV drops",
        "type": "FILE",
        "source": "/data/incoming/sales",
        "destination": "Sales collection",
        "status": "error",
        "frequency": "daily",
        "config": {"filePattern": "*.csv", "delimiter": ",", "hasHeader": True},
        "health_score": 65,
        "owner": "Sales Team",
        "tags": ["sales", "csv", "files"],
    },
    {
        "name": "Kafka Event Stream",
        "description": "Consume platform events and index them",
        "type": "EVENT",
        "source": "Kafka Cluster",
        "destination": "Elasticsearch",
        "status": "warning",
        "frequency": "hourly",
        "config": {
            "kafka": {"brokers": ["kafka1:9092", "kafka2:9092"], "topic": "events-topic"},
            "elastic": {"nodes": ["http://elastic:9200"], "index": "events"},
        },
        "health_score": 78,
        "owner": "Infrastructure Team",
        "tags": ["kafka", "events", "elasticsearch"],
    },
    {
        "name": "Shopify Store Sync",
        "description": "Two-way sync between the Shopify store and the CRM",
        "type": "API",
        "source": "https://api.shopify.com",
        "destination": "Internal CRM",
        "status": "inactive",
        "frequency": "custom",
        "custom_frequency": "0 */4 * * *",
        "config": {"storeUrl": "store.myshopify.com", "apiVersion": "2023-10"},
        "health_score": 0,
        "owner": "E-commerce Team",
        "tags": ["shopify", "ecommerce", "crm"],
    },
]

TASKS_BY_TYPE: dict[str, list[dict[str, Any]]] = {
    "API": [
        {"name": "Authenticate", "type": "extract", "config": {"timeout": 30000}},
        {"name": "Fetch records", "type": "extract", "config": {"pageSize": 100}},
        {"name": "Load records", "type": "load", "config": {"mode": "upsert"}},
    ],
    "DATABASE": [
        {"name": "Connect to source", "type": "extract", "config": {"timeout": 60000}},
        {"name": "Extract tables", "type": "extract", "config": {"tables": ["LEDGER"]}},
        {"name": "Transform ledgers", "type": "transform", "config": {}},
        {"name": "Load warehouse", "type": "load", "config": {}},
    ],
    "FILE": [
        {"name": "Find files", "type": "extract", "config": {"recursive": True}},
        {"name": "Validate rows", "type": "validate", "config": {"strict": True}},
        {"name": "Import rows", "type": "load", "config": {}},
    ],
    "EVENT": [
        {"name": "Consume events", "type": "extract", "config": {"batchSize": 500}},
        {"name": "Index events", "type": "load", "config": {}},
        {"name": "Notify on lag", "type": "notify", "config": {"channel": "#data-alerts"}},
    ],
}


def _seed_tasks(db: Session, integration: Integration) -> None:
    service = TaskService(db)
    previous = None
    for spec in TASKS_BY_TYPE.get(integration.type, []):
        task = service.create(
            TaskCreate(
                integration_id=integration.id,
                depends_on=[previous.id] if previous else [],
                **spec,
            )
        )
        previous = task


def _seed_execution(db: Session, integration: Integration, outcome: str) -> None:
    executions = ExecutionService(db)
    logs = LogService(db)
    execution = executions.start(integration.id, ExecutionStart(triggered_by="seed"))
    for task in TaskService(db).list_by_integration(integration.id):
        level = "error" if outcome == "failed" and task.type == "load" else "info"
        logs.create(
            LogEntryCreate(
                execution_id=execution.id,
                integration_id=integration.id,
                task_id=task.id,
                level=level,
                message=f"{task.name}: {'failed' if level == 'error' else 'done'}",
                details={"message": "Connection reset by peer"} if level == "error" else None,
                source="seed",
            )
        )
    executions.complete(
        execution.id,
        ExecutionComplete(status=outcome, result_data={"seeded": True}),
    )


def seed(db: Session) -> list[Integration]:
    """Create the sample data set; returns the integrations created by this run."""
    service = IntegrationService(db)
    created = []
    for data in INTEGRATIONS:
        if service.integration_repo.get_by_name(data["name"]):
            logger.info("Integration %s already exists, skipping", data["name"])
            continue
        integration = service.create(IntegrationCreate(**data))
        _seed_tasks(db, integration)
        created.append(integration)

    outcomes = {"Finance ETL": "completed", "Sales CSV Processing": "failed"}
    for integration in created:
        outcome = outcomes.get(integration.name)
        if outcome:
            _seed_execution(db, integration, outcome)

    logger.info("Seeded %d integrations", len(created))
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
