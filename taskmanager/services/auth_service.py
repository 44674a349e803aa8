"""Authentication service."""
import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.config import settings
from taskmanager.core.exceptions import ConflictError
from taskmanager.crud.user import user as user_crud
from taskmanager.models.user import User
from taskmanager.schemas.user import UserCreate
from taskmanager.utils.security import create_access_token, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service."""

    @staticmethod
    async def authenticate_user(db: AsyncSession, login: str, password: str) -> Optional[User]:
        """Authenticate a user by username (or email) and password."""
        user = await user_crud.get_by_login(db, login=login)

        if not user:
            return None

        if not verify_password(password, user.password_hash):
            return None

        if not user.is_active:
            return None

        return user

    @staticmethod
    async def register_user(db: AsyncSession, user_in: UserCreate) -> User:
        """Create an account, rejecting taken usernames and emails."""
        if await user_crud.get_by_username(db, username=user_in.username):
            raise ConflictError("Username is already taken")
        if await user_crud.get_by_email(db, email=user_in.email):
            raise ConflictError("Email is already in use")

        user = await user_crud.create(db, obj_in=user_in)
        logger.info("Registered user %s (%s)", user.id, user.username)
        return user

    @staticmethod
    def create_token(user: User) -> dict:
        """Create an access token for a user."""
        access_token = create_access_token(
            data={"sub": str(user.id), "username": user.username},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }
