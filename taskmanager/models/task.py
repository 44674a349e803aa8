"""Task model."""
from enum import Enum

from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship

from taskmanager.database import Base
from taskmanager.db.types import UTCDateTime, utcnow


class TaskStatus(str, Enum):
    """Task status."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskPriority(str, Enum):
    """Task priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(Base):
    """Task owned by a user (multi-tenant) or shared (single-tenant).

    ``archived`` and ``deleted_at`` are independent: a task can be both.
    """

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(TaskStatus), default=TaskStatus.TODO, nullable=False, index=True)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.MEDIUM, nullable=False, index=True)
    due_date = Column(UTCDateTime(), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    archived = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(UTCDateTime(), nullable=True, index=True)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="tasks")

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
