"""Task schemas."""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from taskmanager.models.task import TaskPriority, TaskStatus


class TaskBase(BaseModel):
    """Base task schema."""

    title: str = Field(..., max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Title is required")
        return value


class TaskCreate(TaskBase):
    """Task creation schema. Unset status/priority are defaulted by the service."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class TaskUpdate(TaskBase):
    """Full task update schema; every editable field is overwritten."""

    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM


class TaskStatusUpdate(BaseModel):
    """Status-only update.

    Kept as a plain string so an unknown value reaches the service and is
    rejected there as a validation error rather than a schema error.
    """

    status: str


class TaskFilter(BaseModel):
    """Conjunctive task filter; ``None`` leaves a field unconstrained."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    archived: Optional[bool] = None
    keyword: Optional[str] = None


class TaskResponse(BaseModel):
    """Task response schema."""

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    owner_id: Optional[int] = None
    archived: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskPageResponse(BaseModel):
    """A page of tasks."""

    items: List[TaskResponse]
    total: int
    page: int
    size: int
    total_pages: int

    class Config:
        from_attributes = True


class TaskStatusCount(BaseModel):
    """Number of live tasks in one status."""

    status: TaskStatus
    count: int
