"""Task CRUD operations."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from taskmanager.core.exceptions import ValidationError
from taskmanager.crud.base import CRUDBase
from taskmanager.models.task import Task, TaskStatus
from taskmanager.schemas.common import PageRequest
from taskmanager.schemas.task import TaskFilter

SORTABLE_FIELDS = {
    "id": Task.id,
    "title": Task.title,
    "status": Task.status,
    "priority": Task.priority,
    "due_date": Task.due_date,
    "created_at": Task.created_at,
    "updated_at": Task.updated_at,
}

SORT_ALIASES = {
    "dueDate": "due_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


@dataclass
class TaskPage:
    """One page of a sorted task listing."""

    items: List[Task]
    total: int
    page: int
    size: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = math.ceil(self.total / self.size) if self.size else 0


def sort_clauses(sort_by: str, sort_dir: str) -> List[ColumnElement]:
    """ORDER BY clauses for a sort request, with ``id`` as tie-breaker."""
    column = SORTABLE_FIELDS.get(SORT_ALIASES.get(sort_by, sort_by))
    if column is None:
        raise ValidationError(f"Cannot sort by '{sort_by}'")

    direction = (sort_dir or "").lower()
    if direction not in ("asc", "desc"):
        raise ValidationError(f"Sort direction must be 'asc' or 'desc', got '{sort_dir}'")

    if direction == "asc":
        clauses = [column.asc()]
        if column is not Task.id:
            clauses.append(Task.id.asc())
    else:
        clauses = [column.desc()]
        if column is not Task.id:
            clauses.append(Task.id.desc())
    return clauses


def keyword_clause(keyword: str, *, include_description: bool) -> ColumnElement:
    """Case-insensitive substring match on title (and optionally description)."""
    needle = keyword.lower()
    clause = func.lower(Task.title).contains(needle, autoescape=True)
    if include_description:
        clause = or_(clause, func.lower(Task.description).contains(needle, autoescape=True))
    return clause


class CRUDTask(CRUDBase[Task]):
    """CRUD operations for Task.

    ``criteria`` arguments carry the ownership predicates produced by a
    scope strategy; an empty sequence means no ownership restriction.
    """

    async def get_scoped(
        self,
        db: AsyncSession,
        *,
        id: int,
        criteria: Sequence[ColumnElement],
    ) -> Optional[Task]:
        """Get task by id restricted by ownership criteria."""
        result = await db.execute(select(Task).where(Task.id == id, *criteria))
        return result.scalar_one_or_none()

    async def list_tasks(
        self,
        db: AsyncSession,
        *,
        criteria: Sequence[ColumnElement],
        where: Sequence[ColumnElement] = (),
        deleted: bool = False,
    ) -> List[Task]:
        """List tasks newest first, either live or soft-deleted ones."""
        deleted_clause = Task.deleted_at.is_not(None) if deleted else Task.deleted_at.is_(None)
        result = await db.execute(
            select(Task)
            .where(*criteria, deleted_clause, *where)
            .order_by(*sort_clauses("created_at", "desc"))
        )
        return list(result.scalars().all())

    async def find(
        self,
        db: AsyncSession,
        *,
        criteria: Sequence[ColumnElement],
        filters: Optional[TaskFilter] = None,
        page: Optional[PageRequest] = None,
        search_description: bool = True,
    ) -> TaskPage:
        """Paginated, sorted listing of live tasks matching every given filter."""
        page = page or PageRequest()
        conditions: List[ColumnElement] = [*criteria, Task.deleted_at.is_(None)]

        if filters is not None:
            if filters.status is not None:
                conditions.append(Task.status == filters.status)
            if filters.priority is not None:
                conditions.append(Task.priority == filters.priority)
            if filters.archived is not None:
                conditions.append(Task.archived == filters.archived)
            if filters.keyword is not None:
                conditions.append(
                    keyword_clause(filters.keyword, include_description=search_description)
                )

        order_by = sort_clauses(page.sort_by, page.sort_dir)

        total = await db.scalar(select(func.count()).select_from(Task).where(*conditions))
        result = await db.execute(
            select(Task)
            .where(*conditions)
            .order_by(*order_by)
            .offset(page.page * page.size)
            .limit(page.size)
        )
        return TaskPage(
            items=list(result.scalars().all()),
            total=total or 0,
            page=page.page,
            size=page.size,
        )

    async def list_overdue(
        self,
        db: AsyncSession,
        *,
        criteria: Sequence[ColumnElement],
        now: datetime,
    ) -> List[Task]:
        """Live, unfinished tasks whose due date has passed."""
        result = await db.execute(
            select(Task)
            .where(
                *criteria,
                Task.deleted_at.is_(None),
                Task.status != TaskStatus.COMPLETED,
                Task.due_date.is_not(None),
                Task.due_date < now,
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
        )
        return list(result.scalars().all())

    async def count_by_status(
        self,
        db: AsyncSession,
        *,
        criteria: Sequence[ColumnElement],
    ) -> Dict[TaskStatus, int]:
        """Count live tasks per status; every status is present."""
        result = await db.execute(
            select(Task.status, func.count(Task.id))
            .where(*criteria, Task.deleted_at.is_(None))
            .group_by(Task.status)
        )
        counts = {status: 0 for status in TaskStatus}
        for status, count in result.all():
            counts[TaskStatus(status)] = count
        return counts

    async def soft_delete_all(
        self,
        db: AsyncSession,
        *,
        criteria: Sequence[ColumnElement],
        now: datetime,
    ) -> int:
        """Stamp one ``deleted_at`` on every live task in a single statement."""
        result = await db.execute(
            update(Task)
            .where(*criteria, Task.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
        )
        await db.commit()
        return result.rowcount

    async def remove_all(self, db: AsyncSession) -> int:
        """Permanently delete every task."""
        result = await db.execute(delete(Task))
        await db.commit()
        return result.rowcount


task = CRUDTask(Task)
