"""User model."""
from enum import Enum

from sqlalchemy import Column, String, Boolean, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship

from taskmanager.database import Base
from taskmanager.db.types import UTCDateTime, utcnow


class UserRole(str, Enum):
    """User role."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(SQLEnum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    tasks = relationship("Task", back_populates="owner", passive_deletes=True)
