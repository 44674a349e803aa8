"""Authentication schemas."""
from pydantic import BaseModel

from taskmanager.schemas.user import UserResponse


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
