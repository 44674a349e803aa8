"""Task lifecycle service: ownership checks and state transitions over the task store."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from taskmanager.crud.task import TaskPage, keyword_clause, task as task_crud
from taskmanager.db.types import utcnow
from taskmanager.models.task import Task, TaskPriority, TaskStatus
from taskmanager.models.user import User
from taskmanager.schemas.common import PageRequest
from taskmanager.schemas.task import TaskCreate, TaskFilter, TaskUpdate
from taskmanager.services.scoping import OwnershipScope, OwnerScope

logger = logging.getLogger(__name__)


def _touch(task_obj: Task) -> None:
    """Refresh ``updated_at`` without ever moving it backwards."""
    now = utcnow()
    if task_obj.updated_at is not None and now < task_obj.updated_at:
        now = task_obj.updated_at
    task_obj.updated_at = now


def _owner_id(owner: Optional[User]) -> Optional[int]:
    return owner.id if owner is not None else None


class TaskService:
    """Task lifecycle operations.

    The requesting identity is passed explicitly to every call; the scope
    given at construction decides what that identity may see and touch.
    Lookups that are already scoped report a foreign task as missing
    (``NotFoundError``); restore and permanent delete look the task up by id
    alone and report a foreign task as ``ForbiddenError``.
    """

    def __init__(self, scope: Optional[OwnershipScope] = None):
        self.scope = scope or OwnerScope()

    # Lookups

    async def _get_scoped_or_404(
        self, db: AsyncSession, task_id: int, owner: Optional[User]
    ) -> Task:
        task_obj = await task_crud.get_scoped(
            db, id=task_id, criteria=self.scope.restrict(owner)
        )
        if task_obj is None:
            raise NotFoundError(f"Task not found with id: {task_id}")
        return task_obj

    async def _get_owned_or_403(
        self, db: AsyncSession, task_id: int, owner: Optional[User]
    ) -> Task:
        task_obj = await task_crud.get(db, id=task_id)
        if task_obj is None:
            raise NotFoundError(f"Task not found with id: {task_id}")
        if not self.scope.owns(task_obj, owner):
            logger.warning(
                "Rejected access to task %s by user %s", task_id, _owner_id(owner)
            )
            raise ForbiddenError("Unauthorized")
        return task_obj

    async def get_task(
        self, db: AsyncSession, *, task_id: int, owner: Optional[User]
    ) -> Optional[Task]:
        """Return the task or ``None`` when it is missing or not owned."""
        return await task_crud.get_scoped(
            db, id=task_id, criteria=self.scope.restrict(owner)
        )

    # Listings

    async def list_tasks(self, db: AsyncSession, *, owner: Optional[User]) -> List[Task]:
        """All live tasks, newest first."""
        return await task_crud.list_tasks(db, criteria=self.scope.restrict(owner))

    async def list_tasks_paginated(
        self,
        db: AsyncSession,
        *,
        owner: Optional[User],
        page: Optional[PageRequest] = None,
    ) -> TaskPage:
        return await task_crud.find(
            db, criteria=self.scope.restrict(owner), page=page
        )

    async def list_by_status(
        self, db: AsyncSession, *, owner: Optional[User], status: TaskStatus
    ) -> List[Task]:
        return await task_crud.list_tasks(
            db, criteria=self.scope.restrict(owner), where=[Task.status == status]
        )

    async def list_by_priority(
        self, db: AsyncSession, *, owner: Optional[User], priority: TaskPriority
    ) -> List[Task]:
        return await task_crud.list_tasks(
            db, criteria=self.scope.restrict(owner), where=[Task.priority == priority]
        )

    async def search_tasks(
        self, db: AsyncSession, *, owner: Optional[User], keyword: str
    ) -> List[Task]:
        """Case-insensitive keyword search over live tasks."""
        return await task_crud.list_tasks(
            db,
            criteria=self.scope.restrict(owner),
            where=[keyword_clause(keyword, include_description=self.scope.search_description)],
        )

    async def list_archived(self, db: AsyncSession, *, owner: Optional[User]) -> List[Task]:
        return await task_crud.list_tasks(
            db, criteria=self.scope.restrict(owner), where=[Task.archived.is_(True)]
        )

    async def list_deleted(self, db: AsyncSession, *, owner: Optional[User]) -> List[Task]:
        return await task_crud.list_tasks(
            db, criteria=self.scope.restrict(owner), deleted=True
        )

    async def filter_tasks(
        self,
        db: AsyncSession,
        *,
        owner: Optional[User],
        criteria: Optional[TaskFilter] = None,
        page: Optional[PageRequest] = None,
    ) -> TaskPage:
        """Conjunctive filter over live tasks, paginated and sorted."""
        return await task_crud.find(
            db,
            criteria=self.scope.restrict(owner),
            filters=criteria,
            page=page,
            search_description=self.scope.search_description,
        )

    async def list_overdue(
        self,
        db: AsyncSession,
        *,
        owner: Optional[User],
        now: Optional[datetime] = None,
    ) -> List[Task]:
        """Live, unfinished tasks past their due date, earliest due first."""
        return await task_crud.list_overdue(
            db, criteria=self.scope.restrict(owner), now=now or utcnow()
        )

    async def count_by_status(
        self, db: AsyncSession, *, owner: Optional[User]
    ) -> Dict[TaskStatus, int]:
        return await task_crud.count_by_status(db, criteria=self.scope.restrict(owner))

    # Mutations

    async def create_task(
        self, db: AsyncSession, *, task_in: TaskCreate, owner: Optional[User]
    ) -> Task:
        """Persist a new task, defaulting status to TODO and priority to MEDIUM."""
        data = task_in.model_dump()
        if data.get("status") is None:
            data["status"] = TaskStatus.TODO
        if data.get("priority") is None:
            data["priority"] = TaskPriority.MEDIUM

        now = utcnow()
        task_obj = Task(**data, archived=False, created_at=now, updated_at=now)
        self.scope.bind(task_obj, owner)
        task_obj = await task_crud.save(db, task_obj)
        logger.info("Created task %s for user %s", task_obj.id, _owner_id(owner))
        return task_obj

    async def update_task(
        self,
        db: AsyncSession,
        *,
        task_id: int,
        task_in: TaskUpdate,
        owner: Optional[User],
    ) -> Task:
        """Overwrite every editable field of an owned task."""
        task_obj = await self._get_scoped_or_404(db, task_id, owner)
        task_obj.title = task_in.title
        task_obj.description = task_in.description
        task_obj.status = task_in.status
        task_obj.priority = task_in.priority
        task_obj.due_date = task_in.due_date
        _touch(task_obj)
        return await task_crud.save(db, task_obj)

    async def update_status(
        self,
        db: AsyncSession,
        *,
        task_id: int,
        status: Union[TaskStatus, str],
        owner: Optional[User],
    ) -> Task:
        """Change only the status. Unknown status values are rejected before any lookup."""
        try:
            new_status = TaskStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid task status: {status}")

        task_obj = await self._get_scoped_or_404(db, task_id, owner)
        task_obj.status = new_status
        _touch(task_obj)
        return await task_crud.save(db, task_obj)

    async def _set_archived(
        self, db: AsyncSession, task_id: int, owner: Optional[User], archived: bool
    ) -> Task:
        task_obj = await self._get_scoped_or_404(db, task_id, owner)
        task_obj.archived = archived
        _touch(task_obj)
        return await task_crud.save(db, task_obj)

    async def archive_task(
        self, db: AsyncSession, *, task_id: int, owner: Optional[User]
    ) -> Task:
        return await self._set_archived(db, task_id, owner, True)

    async def unarchive_task(
        self, db: AsyncSession, *, task_id: int, owner: Optional[User]
    ) -> Task:
        return await self._set_archived(db, task_id, owner, False)

    async def delete_task(
        self, db: AsyncSession, *, task_id: int, owner: Optional[User]
    ) -> Task:
        """Soft delete: stamp ``deleted_at``."""
        task_obj = await self._get_scoped_or_404(db, task_id, owner)
        task_obj.deleted_at = utcnow()
        _touch(task_obj)
        task_obj = await task_crud.save(db, task_obj)
        logger.info("Soft-deleted task %s", task_id)
        return task_obj

    async def restore_task(
        self, db: AsyncSession, *, task_id: int, owner: Optional[User]
    ) -> Task:
        """Clear ``deleted_at`` on a soft-deleted task."""
        task_obj = await self._get_owned_or_403(db, task_id, owner)
        if task_obj.deleted_at is None:
            raise ValidationError("Task is not deleted")

        task_obj.deleted_at = None
        _touch(task_obj)
        task_obj = await task_crud.save(db, task_obj)
        logger.info("Restored task %s", task_id)
        return task_obj

    async def permanently_delete_task(
        self, db: AsyncSession, *, task_id: int, owner: Optional[User]
    ) -> None:
        """Remove the task row irreversibly, whatever its deletion state."""
        task_obj = await self._get_owned_or_403(db, task_id, owner)
        await task_crud.delete(db, db_obj=task_obj)
        logger.info("Permanently deleted task %s", task_id)

    async def delete_all_tasks(self, db: AsyncSession, *, owner: Optional[User]) -> int:
        """Delete every task visible to ``owner`` and return how many were affected.

        Owner-scoped deployments soft delete with one shared timestamp; the
        shared single-tenant list is purged permanently.
        """
        if self.scope.purge_on_delete_all:
            count = await task_crud.remove_all(db)
            logger.info("Purged all tasks (%s rows)", count)
            return count

        count = await task_crud.soft_delete_all(
            db, criteria=self.scope.restrict(owner), now=utcnow()
        )
        logger.info("Soft-deleted %s tasks for user %s", count, _owner_id(owner))
        return count
