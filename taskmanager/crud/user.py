"""User CRUD operations."""
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.crud.base import CRUDBase
from taskmanager.models.user import User
from taskmanager.schemas.user import UserCreate
from taskmanager.utils.security import get_password_hash


class CRUDUser(CRUDBase[User]):
    """CRUD operations for User."""

    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[User]:
        """Get user by username."""
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """Get user by email."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_login(self, db: AsyncSession, *, login: str) -> Optional[User]:
        """Get user by username or email."""
        result = await db.execute(
            select(User).where(or_(User.username == login, User.email == login))
        )
        return result.scalars().first()

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        """Create a new user with a hashed password."""
        user_data = obj_in.model_dump(exclude={"password"})
        user_data["password_hash"] = get_password_hash(obj_in.password)
        return await self.save(db, User(**user_data))


user = CRUDUser(User)
