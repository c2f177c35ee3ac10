"""Integration repository for data access."""

import json
from typing import Any
from uuid import UUID

from sqlalchemy import String, cast, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateKeyError
from app.core.pagination import Page, paginate
from app.core.sorting import apply_order_by
from app.models.execution import Execution
from app.models.integration import Integration
from app.models.log_entry import LogEntry
from app.models.task import Task
from app.schemas.integration import IntegrationCreate, IntegrationUpdate


class IntegrationRepository:
    """Repository for Integration model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
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
        """Get one page of integrations matching the filters."""
        query = self.db.query(Integration)
        if status is not None:
            query = query.filter(Integration.status == status)
        if integration_type is not None:
            query = query.filter(Integration.type == integration_type)
        if tags:
            # Any-of match against the serialized JSON list
            query = query.filter(
                or_(
                    *[
                        cast(Integration.tags, String).contains(json.dumps(tag), autoescape=True)
                        for tag in tags
                    ]
                )
            )
        if search:
            query = query.filter(
                or_(
                    Integration.name.icontains(search, autoescape=True),
                    Integration.description.icontains(search, autoescape=True),
                    Integration.source.icontains(search, autoescape=True),
                    Integration.destination.icontains(search, autoescape=True),
                )
            )
        query = apply_order_by(query, Integration, sort_by, sort_order)
        return paginate(query, page, limit)

    def get_ids(self, after: UUID | None = None, limit: int = 500) -> list[UUID]:
        """Get integration ids in keyset batches, for housekeeping jobs."""
        query = self.db.query(Integration.id)
        if after is not None:
            query = query.filter(Integration.id > after)
        return [row[0] for row in query.order_by(Integration.id).limit(limit).all()]

    def get_by_id(self, integration_id: UUID) -> Integration | None:
        """Get an integration by ID."""
        return self.db.query(Integration).filter(Integration.id == integration_id).first()

    def get_by_ids(self, integration_ids: set[UUID]) -> dict[UUID, Integration]:
        """Get integrations keyed by ID; missing ids are absent from the result."""
        if not integration_ids:
            return {}
        rows = self.db.query(Integration).filter(Integration.id.in_(integration_ids)).all()
        return {row.id: row for row in rows}

    def get_by_name(self, name: str) -> Integration | None:
        return self.db.query(Integration).filter(Integration.name == name).first()

    def create(self, data: IntegrationCreate) -> Integration:
        """Create a new integration."""
        integration = Integration(**data.model_dump(mode="json"))
        self.db.add(integration)
        self._commit_unique(integration.name)
        self.db.refresh(integration)
        return integration

    def update(self, integration_id: UUID, data: IntegrationUpdate) -> Integration | None:
        """Shallow-merge the provided fields into an integration."""
        integration = self.get_by_id(integration_id)
        if not integration:
            return None
        for key, value in data.model_dump(mode="json", exclude_unset=True).items():
            setattr(integration, key, value)
        self._commit_unique(integration.name)
        self.db.refresh(integration)
        return integration

    def save(self, integration: Integration) -> Integration:
        self.db.commit()
        self.db.refresh(integration)
        return integration

    def delete(self, integration_id: UUID, cascade: bool = False) -> bool:
        """Delete an integration, and with cascade its tasks, executions and logs."""
        integration = self.get_by_id(integration_id)
        if not integration:
            return False
        if cascade:
            self.db.query(LogEntry).filter(LogEntry.integration_id == integration_id).delete(
                synchronize_session=False
            )
            self.db.query(Execution).filter(Execution.integration_id == integration_id).delete(
                synchronize_session=False
            )
            self.db.query(Task).filter(Task.integration_id == integration_id).delete(
                synchronize_session=False
            )
        self.db.delete(integration)
        self.db.commit()
        return True

    def count(self) -> int:
        return self.db.query(func.count(Integration.id)).scalar() or 0

    def count_grouped_by(self, column: Any) -> list[tuple[str, int]]:
        """Count integrations grouped by one column, e.g. ``Integration.type``."""
        rows = (
            self.db.query(column, func.count(Integration.id))
            .group_by(column)
            .order_by(column)
            .all()
        )
        return [(value, count) for value, count in rows]

    def _commit_unique(self, name: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateKeyError("name", name) from None
