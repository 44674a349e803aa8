"""Tasks API endpoints."""
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.config import settings
from taskmanager.core.exceptions import NotFoundError
from taskmanager.database import get_db
from taskmanager.dependencies import get_task_owner, get_task_service
from taskmanager.models.task import TaskPriority, TaskStatus
from taskmanager.models.user import User
from taskmanager.schemas.common import PageRequest
from taskmanager.schemas.task import (
    TaskCreate,
    TaskFilter,
    TaskPageResponse,
    TaskResponse,
    TaskStatusCount,
    TaskStatusUpdate,
    TaskUpdate,
)
from taskmanager.services.task_service import TaskService

router = APIRouter()


def page_params(
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: str = "created_at",
    sort_dir: str = "desc",
) -> PageRequest:
    """Pagination query parameters."""
    return PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)


@router.get("", response_model=Union[TaskPageResponse, List[TaskResponse]])
async def list_tasks(
    paginate: bool = False,
    page: PageRequest = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """List live tasks, newest first, or one page of them when ``paginate`` is set."""
    if paginate:
        result = await service.list_tasks_paginated(db, owner=owner, page=page)
        return TaskPageResponse.model_validate(result)
    return await service.list_tasks(db, owner=owner)


@router.get("/status/{task_status}", response_model=List[TaskResponse])
async def list_tasks_by_status(
    task_status: TaskStatus,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.list_by_status(db, owner=owner, status=task_status)


@router.get("/priority/{priority}", response_model=List[TaskResponse])
async def list_tasks_by_priority(
    priority: TaskPriority,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.list_by_priority(db, owner=owner, priority=priority)


@router.get("/search", response_model=List[TaskResponse])
async def search_tasks(
    keyword: str,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Case-insensitive keyword search."""
    return await service.search_tasks(db, owner=owner, keyword=keyword)


@router.get("/filter", response_model=TaskPageResponse)
async def filter_tasks(
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    archived: Optional[bool] = None,
    keyword: Optional[str] = None,
    page: PageRequest = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Filter by any combination of status, priority, archived flag and keyword."""
    criteria = TaskFilter(
        status=task_status,
        priority=priority,
        archived=archived,
        keyword=keyword,
    )
    result = await service.filter_tasks(db, owner=owner, criteria=criteria, page=page)
    return TaskPageResponse.model_validate(result)


@router.get("/archived", response_model=List[TaskResponse])
async def list_archived_tasks(
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.list_archived(db, owner=owner)


@router.get("/deleted", response_model=List[TaskResponse])
async def list_deleted_tasks(
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.list_deleted(db, owner=owner)


@router.get("/overdue", response_model=List[TaskResponse])
async def list_overdue_tasks(
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Unfinished tasks past their due date."""
    return await service.list_overdue(db, owner=owner)


@router.get("/stats", response_model=List[TaskStatusCount])
async def task_stats(
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Number of live tasks in each status."""
    counts = await service.count_by_status(db, owner=owner)
    return [TaskStatusCount(status=key, count=value) for key, value in counts.items()]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Fetch task by id."""
    task_obj = await service.get_task(db, task_id=task_id, owner=owner)
    if not task_obj:
        raise NotFoundError("Task not found")
    return task_obj


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Create a task."""
    return await service.create_task(db, task_in=payload, owner=owner)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Replace the editable fields of a task."""
    return await service.update_task(db, task_id=task_id, task_in=payload, owner=owner)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.update_status(db, task_id=task_id, status=payload.status, owner=owner)


@router.patch("/{task_id}/archive", response_model=TaskResponse)
async def archive_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.archive_task(db, task_id=task_id, owner=owner)


@router.patch("/{task_id}/unarchive", response_model=TaskResponse)
async def unarchive_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.unarchive_task(db, task_id=task_id, owner=owner)


@router.patch("/{task_id}/restore", response_model=TaskResponse)
async def restore_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Bring a soft-deleted task back."""
    return await service.restore_task(db, task_id=task_id, owner=owner)


@router.delete("/{task_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
async def permanently_delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Remove a task for good."""
    await service.permanently_delete_task(db, task_id=task_id, owner=owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Soft delete a task."""
    await service.delete_task(db, task_id=task_id, owner=owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_all_tasks(
    db: AsyncSession = Depends(get_db),
    owner: Optional[User] = Depends(get_task_owner),
    service: TaskService = Depends(get_task_service),
):
    """Delete every task of the caller (soft) or, single-tenant, every task (permanent)."""
    await service.delete_all_tasks(db, owner=owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
