"""FastAPI dependencies for identity resolution and the task service."""
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.config import settings
from taskmanager.core.exceptions import ForbiddenError, UnauthorizedError
from taskmanager.crud.user import user as user_crud
from taskmanager.database import get_db
from taskmanager.models.user import User
from taskmanager.services.scoping import scope_for_mode
from taskmanager.services.task_service import TaskService
from taskmanager.utils.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False
)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from JWT token."""
    credentials_exception = UnauthorizedError("Could not validate credentials")
    if not token:
        raise UnauthorizedError("Not authenticated")

    try:
        payload = decode_token(token)
        user_id: Optional[str] = payload.get("sub")
        token_type: Optional[str] = payload.get("type")

        if user_id is None or token_type != "access":
            raise credentials_exception
        user_pk = int(user_id)
    except ValueError:
        raise credentials_exception

    user = await user_crud.get(db, id=user_pk)
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise ForbiddenError("User is inactive")

    return user


def get_task_service() -> TaskService:
    """Task service configured for the deployment's tenancy mode."""
    return TaskService(scope_for_mode(settings.TENANCY_MODE))


async def get_task_owner(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Requesting identity for task routes; ``None`` in single-tenant mode."""
    if not settings.is_multi_tenant:
        return None
    return await get_current_user(token=token, db=db)
