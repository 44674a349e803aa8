"""Model modules."""
from taskmanager.models.user import User, UserRole
from taskmanager.models.task import Task, TaskPriority, TaskStatus

__all__ = [
    "User",
    "UserRole",
    "Task",
    "TaskPriority",
    "TaskStatus",
]
