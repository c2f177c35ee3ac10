"""Executions router: run lifecycle reported by the external runner."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.execution import Execution
from app.models.integration import Integration
from app.schemas.common import ApiResponse, PaginatedResponse
from app.schemas.execution import (
    ExecutionComplete,
    ExecutionDetailResponse,
    ExecutionResponse,
    ExecutionStart,
    TaskOutcome,
)
from app.schemas.integration import IntegrationBrief
from app.services.execution_service import ExecutionService

router = APIRouter()


def _with_integration(
    execution: Execution,
    integration: Integration | None,
    include_status: bool = False,
) -> ExecutionDetailResponse:
    detail = ExecutionDetailResponse.model_validate(execution)
    if integration is not None:
        detail.integration = IntegrationBrief(
            id=integration.id,
            name=integration.name,
            type=integration.type,
            status=integration.status if include_status else None,
        )
    return detail


@router.post(
    "/integration/{integration_id}",
    response_model=ApiResponse[ExecutionResponse],
    status_code=201,
    summary="Start execution",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Integration not found"},
    },
)
async def start_execution(
    integration_id: UUID,
    data: ExecutionStart | None = Body(default=None),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Record the start of a run; the body is optional."""
    execution = ExecutionService(db).start(integration_id, data)
    return {
        "message": "Execution started successfully",
        "data": ExecutionResponse.model_validate(execution),
    }


@router.put(
    "/{execution_id}/complete",
    response_model=ApiResponse[ExecutionResponse],
    summary="Complete execution",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Execution not found"},
    },
)
async def complete_execution(
    execution_id: UUID,
    data: ExecutionComplete,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Finish a run and update the owning integration's status."""
    execution = ExecutionService(db).complete(execution_id, data)
    return {
        "message": "Execution completed successfully",
        "data": ExecutionResponse.model_validate(execution),
    }


@router.put(
    "/{execution_id}/cancel",
    response_model=ApiResponse[ExecutionResponse],
    summary="Cancel execution",
    responses={
        400: {"description": "Execution is not pending or running"},
        404: {"description": "Execution not found"},
    },
)
async def cancel_execution(
    execution_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    execution = ExecutionService(db).cancel(execution_id)
    return {
        "message": "Execution cancelled successfully",
        "data": ExecutionResponse.model_validate(execution),
    }


@router.patch(
    "/{execution_id}/summary",
    response_model=ApiResponse[ExecutionResponse],
    summary="Record task outcome",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Execution not found"},
    },
)
async def record_task_outcome(
    execution_id: UUID,
    data: TaskOutcome,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Count one task outcome in the execution summary."""
    execution = ExecutionService(db).record_task_outcome(execution_id, data.task_status)
    return {
        "message": "Execution summary updated successfully",
        "data": ExecutionResponse.model_validate(execution),
    }


@router.get(
    "/integration/{integration_id}",
    response_model=PaginatedResponse[ExecutionResponse],
    summary="List executions of an integration",
    responses={404: {"description": "Integration not found"}},
)
async def list_executions_by_integration(
    integration_id: UUID,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Executions of one integration, newest first."""
    result = ExecutionService(db).list_by_integration(integration_id, page=page, limit=limit)
    return {
        "message": "Executions retrieved successfully",
        "data": [ExecutionResponse.model_validate(item) for item in result.items],
        "pagination": result.meta(),
    }


@router.get(
    "/recent/all",
    response_model=ApiResponse[list[ExecutionDetailResponse]],
    summary="Recent executions",
)
async def list_recent_executions(
    limit: int = Query(default=20, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Newest executions across all integrations."""
    rows = ExecutionService(db).recent(limit)
    return {
        "message": "Recent executions retrieved successfully",
        "data": [
            _with_integration(execution, integration, include_status=True)
            for execution, integration in rows
        ],
    }


@router.get(
    "/{execution_id}",
    response_model=ApiResponse[ExecutionDetailResponse],
    summary="Get execution",
    responses={404: {"description": "Execution not found"}},
)
async def get_execution(
    execution_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    execution, integration = ExecutionService(db).get_with_integration(execution_id)
    return {
        "message": "Execution retrieved successfully",
        "data": _with_integration(execution, integration),
    }
