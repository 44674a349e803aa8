"""Schema modules."""
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
from taskmanager.schemas.user import UserCreate, UserResponse
from taskmanager.schemas.auth import TokenResponse

__all__ = [
    "PageRequest",
    "TaskCreate",
    "TaskFilter",
    "TaskPageResponse",
    "TaskResponse",
    "TaskStatusCount",
    "TaskStatusUpdate",
    "TaskUpdate",
    "UserCreate",
    "UserResponse",
    "TokenResponse",
]
