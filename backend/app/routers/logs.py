"""Logs router: execution log entries and their aggregates."""

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.common import ApiResponse, PaginatedResponse
from app.schemas.log_entry import LogEntryCreate, LogEntryResponse, LogLevelDistribution
from app.services.log_service import LogService

router = APIRouter()

LEVEL_PATTERN = "^(all|debug|info|warning|error)$"
SORT_PATTERN = "^(asc|desc)$"


def _level_filter(level: str | None) -> str | None:
    return None if level in (None, "all") else level


def _page_payload(message: str, result: Any) -> dict[str, Any]:
    return {
        "message": message,
        "data": [LogEntryResponse.model_validate(entry) for entry in result.items],
        "pagination": result.meta(),
    }


@router.post(
    "",
    response_model=ApiResponse[LogEntryResponse],
    status_code=201,
    summary="Create log entry",
    responses={400: {"description": "Validation error"}},
)
async def create_log_entry(
    data: LogEntryCreate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    entry = LogService(db).create(data)
    return {"message": "Log created successfully", "data": LogEntryResponse.model_validate(entry)}


@router.get(
    "/execution/{execution_id}",
    response_model=PaginatedResponse[LogEntryResponse],
    summary="List logs of an execution",
)
async def list_logs_by_execution(
    execution_id: UUID,
    task_id: UUID | None = Query(default=None, alias="taskId"),
    level: str | None = Query(default=None, pattern=LEVEL_PATTERN),
    search: str | None = Query(default=None),
    sort_order: str = Query(default="asc", alias="sortOrder", pattern=SORT_PATTERN),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """An execution's log in chronological order."""
    result = LogService(db).list_by_execution(
        execution_id,
        task_id=task_id,
        level=_level_filter(level),
        search=search,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return _page_payload("Logs retrieved successfully", result)


@router.get(
    "/task/{task_id}",
    response_model=PaginatedResponse[LogEntryResponse],
    summary="List logs of a task",
)
async def list_logs_by_task(
    task_id: UUID,
    execution_id: UUID | None = Query(default=None, alias="executionId"),
    level: str | None = Query(default=None, pattern=LEVEL_PATTERN),
    search: str | None = Query(default=None),
    sort_order: str = Query(default="asc", alias="sortOrder", pattern=SORT_PATTERN),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    result = LogService(db).list_by_task(
        task_id,
        execution_id=execution_id,
        level=_level_filter(level),
        search=search,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return _page_payload("Logs retrieved successfully", result)


@router.get(
    "/integration/{integration_id}",
    response_model=PaginatedResponse[LogEntryResponse],
    summary="List logs of an integration",
)
async def list_logs_by_integration(
    integration_id: UUID,
    execution_id: UUID | None = Query(default=None, alias="executionId"),
    task_id: UUID | None = Query(default=None, alias="taskId"),
    level: str | None = Query(default=None, pattern=LEVEL_PATTERN),
    search: str | None = Query(default=None),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    sort_order: str = Query(default="desc", alias="sortOrder", pattern=SORT_PATTERN),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """An integration's log, most recent first."""
    result = LogService(db).list_by_integration(
        integration_id,
        execution_id=execution_id,
        task_id=task_id,
        level=_level_filter(level),
        search=search,
        start_date=start_date,
        end_date=end_date,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return _page_payload("Logs retrieved successfully", result)


@router.get(
    "/integration/{integration_id}/errors",
    response_model=ApiResponse[list[LogEntryResponse]],
    summary="Recent error logs of an integration",
)
async def list_recent_errors(
    integration_id: UUID,
    limit: int = Query(default=50, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    entries = LogService(db).recent_errors(integration_id, limit=limit)
    return {
        "message": "Recent errors retrieved successfully",
        "data": [LogEntryResponse.model_validate(entry) for entry in entries],
    }


@router.get(
    "/integration/{integration_id}/distribution",
    response_model=ApiResponse[LogLevelDistribution],
    summary="Log level distribution of an integration",
)
async def get_level_distribution(
    integration_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    distribution = LogService(db).level_distribution(integration_id)
    return {
        "message": "Log level distribution retrieved successfully",
        "data": LogLevelDistribution(**distribution),
    }
