"""
Task API endpoints.

Every endpoint requires authentication and operates on the caller's
tasks only.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_task_service
from api.middleware.auth import get_auth_context
from shared.models import AuthContext, SuccessResponse

from .interfaces import ITaskService
from .models import (
    CompletedTasksResponse,
    Priority,
    SortOrder,
    TaskFilter,
    TaskInput,
    TaskListResponse,
    TaskResponse,
    TaskSort,
    TaskSortField,
    TaskStatsResponse,
    TaskStatus,
)
from .service import MAX_COMPLETED_LIMIT

router = APIRouter()


@router.get("", response_model=SuccessResponse[TaskListResponse])
async def list_tasks(
    status: Optional[list[TaskStatus]] = Query(default=None, description="Repeatable; defaults to active"),
    priority: Optional[list[Priority]] = Query(default=None, description="Repeatable"),
    search: Optional[str] = Query(default=None, description="Substring of title or description"),
    sort_by: Optional[TaskSortField] = Query(default=None, alias="sortBy"),
    order: SortOrder = Query(default=SortOrder.ASC),
    due_from: Optional[date] = Query(default=None, alias="dueFrom"),
    due_to: Optional[date] = Query(default=None, alias="dueTo"),
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[TaskListResponse]:
    """
    List the current user's tasks with stats.

    Newest first unless ``sortBy`` is given.
    """
    filters = TaskFilter(
        status=status,
        priority=priority,
        search=search,
        due_from=due_from,
        due_to=due_to,
    )
    sort = TaskSort(field=sort_by, order=order) if sort_by else None

    tasks = await service.get_tasks(ctx.user_id, filters, sort)
    stats = await service.get_task_stats(ctx.user_id)
    return SuccessResponse(data=TaskListResponse(tasks=tasks, stats=stats, total=len(tasks)))


@router.get("/stats", response_model=SuccessResponse[TaskStatsResponse])
async def task_stats(
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[TaskStatsResponse]:
    stats = await service.get_task_stats(ctx.user_id)
    return SuccessResponse(data=TaskStatsResponse(stats=stats))


@router.get("/completed", response_model=SuccessResponse[CompletedTasksResponse])
async def completed_tasks(
    limit: Optional[int] = Query(default=None, ge=1, le=MAX_COMPLETED_LIMIT),
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[CompletedTasksResponse]:
    """
    Most recently completed tasks first.
    """
    tasks = await service.get_completed_tasks(ctx.user_id, limit)
    return SuccessResponse(data=CompletedTasksResponse(tasks=tasks, total=len(tasks)))


@router.get("/{task_id}", response_model=SuccessResponse[TaskResponse])
async def get_task(
    task_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[TaskResponse]:
    task = await service.get_task_by_id(ctx.user_id, task_id)
    return SuccessResponse(data=TaskResponse(task=task))


@router.post("", response_model=SuccessResponse[TaskResponse], status_code=201)
async def create_task(
    request: TaskInput,
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[TaskResponse]:
    """
    Create a task. ``title`` and ``priority`` are required.
    """
    task = await service.create_task(ctx.user_id, request)
    return SuccessResponse(message="Task created successfully", data=TaskResponse(task=task))


@router.put("/{task_id}", response_model=SuccessResponse[TaskResponse])
async def update_task(
    task_id: str,
    request: TaskInput,
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[TaskResponse]:
    """
    Update the fields present in the body; send null to clear
    ``description`` or ``dueDate``.
    """
    task = await service.update_task(ctx.user_id, task_id, request)
    return SuccessResponse(message="Task updated successfully", data=TaskResponse(task=task))


@router.patch("/{task_id}/complete", response_model=SuccessResponse[TaskResponse])
async def complete_task(
    task_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse[TaskResponse]:
    task = await service.complete_task(ctx.user_id, task_id)
    return SuccessResponse(message="Task marked as complete", data=TaskResponse(task=task))


@router.delete("/{task_id}", response_model=SuccessResponse)
async def delete_task(
    task_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    service: ITaskService = Depends(get_task_service),
) -> SuccessResponse:
    await service.delete_task(ctx.user_id, task_id)
    return SuccessResponse(message="Task deleted successfully")
