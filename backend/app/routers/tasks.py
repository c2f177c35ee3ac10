"""Tasks router for the ordered steps of an integration."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.task import TaskCreate, TaskReorder, TaskResponse, TaskStatusUpdate, TaskUpdate
from app.services.task_service import TaskService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[TaskResponse],
    status_code=201,
    summary="Create task",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Integration not found"},
    },
)
async def create_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Create a task; without ``order`` it is appended after the last task."""
    task = TaskService(db).create(data)
    return {"message": "Task created successfully", "data": TaskResponse.model_validate(task)}


@router.get(
    "/integration/{integration_id}",
    response_model=ApiResponse[list[TaskResponse]],
    summary="List tasks of an integration",
    responses={404: {"description": "Integration not found"}},
)
async def list_tasks_by_integration(
    integration_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    tasks = TaskService(db).list_by_integration(integration_id)
    return {
        "message": "Tasks retrieved successfully",
        "data": [TaskResponse.model_validate(task) for task in tasks],
    }


@router.put(
    "/order/update",
    response_model=ApiResponse[list[TaskResponse]],
    summary="Reorder tasks",
    responses={400: {"description": "Validation error"}},
)
async def reorder_tasks(
    data: TaskReorder,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Set ``order`` for each listed task. Unknown task ids are skipped."""
    tasks = TaskService(db).reorder(data.tasks)
    return {
        "message": "Task order updated successfully",
        "data": [TaskResponse.model_validate(task) for task in tasks],
    }


@router.get(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    summary="Get task",
    responses={404: {"description": "Task not found"}},
)
async def get_task(
    task_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    task = TaskService(db).get(task_id)
    return {"message": "Task retrieved successfully", "data": TaskResponse.model_validate(task)}


@router.put(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    summary="Update task",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Task not found"},
    },
)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    task = TaskService(db).update(task_id, data)
    return {"message": "Task updated successfully", "data": TaskResponse.model_validate(task)}


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete task",
    responses={404: {"description": "Task not found"}},
)
async def delete_task(
    task_id: UUID,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Delete a task and shift the tasks after it down by one."""
    TaskService(db).delete(task_id)
    return {"message": "Task deleted successfully"}


@router.patch(
    "/{task_id}/status",
    response_model=ApiResponse[TaskResponse],
    summary="Set task status",
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Task not found"},
    },
)
async def update_task_status(
    task_id: UUID,
    data: TaskStatusUpdate,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    task = TaskService(db).set_status(task_id, data.status)
    return {
        "message": "Task status updated successfully",
        "data": TaskResponse.model_validate(task),
    }
