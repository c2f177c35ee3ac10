"""Task model: one ordered step of an integration."""

from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid, utc_now

DEFAULT_TASK_TIMEOUT_MS = 3_600_000
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF_MS = 60_000


class TaskType(str, Enum):
    EXTRACT = "extract"
    TRANSFORM = "transform"
    LOAD = "load"
    VALIDATE = "validate"
    NOTIFY = "notify"
    CUSTOM = "custom"


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    WARNING = "warning"
    SKIPPED = "skipped"


def default_retry_strategy() -> dict[str, Any]:
    return {"attempts": DEFAULT_RETRY_ATTEMPTS, "backoff": DEFAULT_RETRY_BACKOFF_MS}


class Task(Base):
    """Task model.

    ``order`` is zero-based and kept gapless per integration by the task service;
    the database does not enforce it.
    """

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_integration_order", "integration_id", "order"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    integration_id = Column(UUIDType, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    order = Column(Integer, nullable=False, default=0)
    depends_on = Column(JSON, nullable=False, default=list)
    config = Column(JSON, nullable=False, default=dict)
    timeout = Column(Integer, nullable=False, default=DEFAULT_TASK_TIMEOUT_MS)
    retry_strategy = Column(JSON, nullable=False, default=default_retry_strategy)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
