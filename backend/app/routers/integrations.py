"""Integrations router for managing pipeline definitions."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from app.schemas.integration import (
    IntegrationCreate,
    IntegrationResponse,
    IntegrationStats,
    IntegrationStatusUpdate,
    IntegrationUpdate,
)
from app.services.integration_service import IntegrationService

router = APIRouter()

ALL = "all"


@router.post(
    "",
    response_model=ApiResponse[IntegrationResponse],
    status_code=201,
    summary="Create integration",
    responses={
        400: {"description": "Validation error"},
        409: {"description": "Integration with this name already exists"},
    },
)
async def create_integration(
    data: IntegrationCreate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Create a new integration."""
    integration = IntegrationService(db).create(data)
    return {
        "message": "Integration created successfully",
        "data": IntegrationResponse.model_validate(integration),
    }


@router.get(
    "",
    response_model=PaginatedResponse[IntegrationResponse],
    summary="List integrations",
    responses={400: {"description": "Validation error"}},
)
async def list_integrations(
    status: str | None = Query(default=None),
    integration_type: str | None = Query(default=None, alias="type"),
    tags: str | None = Query(default=None, description="Comma-separated, matches any"),
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=1000),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """List integrations with filtering, search, sorting and pagination."""
    tag_list = [tag.strip() for tag in tags.split(",") if tag.strip()] if tags else None
    result = IntegrationService(db).list_integrations(
        page=page,
        limit=limit,
        status=None if status == ALL else status,
        integration_type=None if integration_type == ALL else integration_type,
        tags=tag_list,
        search=search.strip() if search else None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {
        "message": "Integrations retrieved successfully",
        "data": [IntegrationResponse.model_validate(item) for item in result.items],
        "pagination": result.meta(),
    }


@router.get(
    "/stats/overview",
    response_model=ApiResponse[IntegrationStats],
    summary="Integration statistics",
)
async def get_integration_stats(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Totals grouped by status, type and frequency."""
    return {
        "message": "Integration statistics retrieved successfully",
        "data": IntegrationStats.model_validate(IntegrationService(db).stats()),
    }


@router.get(
    "/{integration_id}",
    response_model=ApiResponse[IntegrationResponse],
    summary="Get integration",
    responses={404: {"description": "Integration not found"}},
)
async def get_integration(
    integration_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    integration = IntegrationService(db).get(integration_id)
    return {
        "message": "Integration retrieved successfully",
        "data": IntegrationResponse.model_validate(integration),
    }


@router.put(
    "/{integration_id}",
    response_model=ApiResponse[IntegrationResponse],
    summary="Update integration",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Integration not found"},
        409: {"description": "Integration with this name already exists"},
    },
)
async def update_integration(
    integration_id: UUID,
    data: IntegrationUpdate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Update the provided fields of an integration."""
    integration = IntegrationService(db).update(integration_id, data)
    return {
        "message": "Integration updated successfully",
        "data": IntegrationResponse.model_validate(integration),
    }


@router.delete(
    "/{integration_id}",
    response_model=MessageResponse,
    summary="Delete integration",
    responses={404: {"description": "Integration not found"}},
)
async def delete_integration(
    integration_id: UUID,
    cascade: bool = Query(default=False, description="Also delete tasks, executions and logs"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    IntegrationService(db).delete(integration_id, cascade=cascade)
    return {"message": "Integration deleted successfully"}


@router.patch(
    "/{integration_id}/status",
    response_model=ApiResponse[IntegrationResponse],
    summary="Set integration status",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Integration not found"},
    },
)
async def update_integration_status(
    integration_id: UUID,
    data: IntegrationStatusUpdate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    integration = IntegrationService(db).set_status(integration_id, data.status)
    return {
        "message": "Integration status updated successfully",
        "data": IntegrationResponse.model_validate(integration),
    }
