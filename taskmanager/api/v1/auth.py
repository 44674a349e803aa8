"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.core.exceptions import UnauthorizedError
from taskmanager.database import get_db
from taskmanager.dependencies import get_current_user
from taskmanager.models.user import User
from taskmanager.schemas.auth import TokenResponse
from taskmanager.schemas.user import UserCreate, UserResponse
from taskmanager.services.auth_service import AuthService

router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a new user."""
    return await AuthService.register_user(db, payload)


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Login endpoint - returns a bearer access token.

    Supports OAuth2 password flow (form data); ``username`` may also be the email.
    """
    user = await AuthService.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise UnauthorizedError("Invalid username or password")

    token = AuthService.create_token(user)
    return TokenResponse(**token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Get current authenticated user information."""
    return current_user
