from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator, model_validator

from app.models.integration import IntegrationFrequency, IntegrationStatus, IntegrationType
from app.schemas.common import CamelModel, JsonDocument, dedupe, reject_explicit_nulls


class IntegrationCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=3, max_length=100)
    description: str = ""
    type: IntegrationType
    source: str = Field(..., min_length=1, max_length=500)
    destination: str = Field(..., min_length=1, max_length=500)
    status: IntegrationStatus = IntegrationStatus.INACTIVE
    frequency: IntegrationFrequency = IntegrationFrequency.DAILY
    custom_frequency: str | None = Field(default=None, max_length=255)
    config: JsonDocument = Field(default_factory=dict)
    health_score: int = Field(default=100, ge=0, le=100)
    owner: str | None = Field(default=None, max_length=255)
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str]) -> list[str]:
        return dedupe([tag.strip() for tag in value])

    @model_validator(mode="after")
    def validate_custom_frequency(self) -> Self:
        """customFrequency is required when frequency is custom."""
        if self.frequency == IntegrationFrequency.CUSTOM and not self.custom_frequency:
            msg = 'customFrequency is required when frequency is "custom"'
            raise ValueError(msg)
        return self


class IntegrationUpdate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = None
    type: IntegrationType | None = None
    source: str | None = Field(default=None, min_length=1, max_length=500)
    destination: str | None = Field(default=None, min_length=1, max_length=500)
    status: IntegrationStatus | None = None
    frequency: IntegrationFrequency | None = None
    custom_frequency: str | None = Field(default=None, max_length=255)
    config: JsonDocument | None = None
    health_score: int | None = Field(default=None, ge=0, le=100)
    owner: str | None = Field(default=None, max_length=255)
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return dedupe([tag.strip() for tag in value])

    @model_validator(mode="after")
    def validate_patch(self) -> Self:
        if not self.model_fields_set:
            msg = "At least one field must be provided for update"
            raise ValueError(msg)
        reject_explicit_nulls(
            self,
            (
                "name",
                "description",
                "type",
                "source",
                "destination",
                "status",
                "frequency",
                "config",
                "health_score",
                "tags",
            ),
        )
        if (
            self.frequency == IntegrationFrequency.CUSTOM
            and "custom_frequency" in self.model_fields_set
            and not self.custom_frequency
        ):
            msg = 'customFrequency is required when frequency is "custom"'
            raise ValueError(msg)
        return self


class IntegrationStatusUpdate(CamelModel):
    status: IntegrationStatus


class LastExecution(CamelModel):
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: str | None = None


class IntegrationResponse(CamelModel):
    id: UUID
    name: str
    description: str
    type: str
    source: str
    destination: str
    status: str
    frequency: str
    custom_frequency: str | None = None
    config: JsonDocument
    last_execution: LastExecution | None = None
    health_score: int
    owner: str | None = None
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class IntegrationBrief(CamelModel):
    """Denormalised owner summary embedded in execution payloads."""

    id: UUID
    name: str
    type: str
    status: str | None = None


class TypeCount(CamelModel):
    type: str
    count: int


class FrequencyCount(CamelModel):
    frequency: str
    count: int


class IntegrationStats(CamelModel):
    total: int
    by_status: dict[str, int]
    by_type: list[TypeCount]
    by_frequency: list[FrequencyCount]
