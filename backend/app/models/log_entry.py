"""LogEntry model: append-only structured log lines reported during an execution."""

from enum import Enum

from sqlalchemy import JSON, Column, DateTime, Index, String, Text

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid, utc_now


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogEntry(Base):
    """LogEntry model.

    A null ``task_id`` marks an execution-level entry. ``integration_id`` is
    denormalised from the execution for integration-wide queries.
    """

    __tablename__ = "logs"
    __table_args__ = (
        Index("ix_logs_execution_timestamp", "execution_id", "timestamp"),
        Index("ix_logs_integration_timestamp", "integration_id", "timestamp"),
        Index("ix_logs_task_timestamp", "task_id", "timestamp"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    task_id = Column(UUIDType, nullable=True)
    execution_id = Column(UUIDType, nullable=False)
    integration_id = Column(UUIDType, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    level = Column(String(10), nullable=False, default=LogLevel.INFO.value, index=True)
    message = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)
    source = Column(String(255), nullable=False, default="system")
    context = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), default=utc_now)
