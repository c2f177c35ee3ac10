"""Integration model: a monitored data pipeline definition."""

from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid, utc_now


class IntegrationType(str, Enum):
    """Kinds of source systems an integration reads from."""

    API = "API"
    DATABASE = "DATABASE"
    FILE = "FILE"
    EVENT = "EVENT"
    OTHER = "OTHER"


class IntegrationStatus(str, Enum):
    """Health status of an integration."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"
    WARNING = "warning"


class IntegrationFrequency(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class Integration(Base):
    """Integration model, the root aggregate for tasks, executions and logs."""

    __tablename__ = "integrations"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    type = Column(String(20), nullable=False, index=True)
    source = Column(String(500), nullable=False)
    destination = Column(String(500), nullable=False)
    status = Column(
        String(20), nullable=False, default=IntegrationStatus.INACTIVE.value, index=True
    )
    frequency = Column(String(20), nullable=False, default=IntegrationFrequency.DAILY.value)
    custom_frequency = Column(String(255), nullable=True)
    config = Column(JSON, nullable=False, default=dict)
    health_score = Column(Integer, nullable=False, default=100)
    owner = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    # Snapshot of the most recently started or finished execution
    last_execution_start_time = Column(DateTime(timezone=True), nullable=True)
    last_execution_end_time = Column(DateTime(timezone=True), nullable=True)
    last_execution_status = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    @property
    def last_execution(self) -> dict[str, Any] | None:
        if self.last_execution_status is None and self.last_execution_start_time is None:
            return None
        return {
            "start_time": self.last_execution_start_time,
            "end_time": self.last_execution_end_time,
            "status": self.last_execution_status,
        }
