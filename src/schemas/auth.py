"""Authentication and user schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserSignup(BaseModel):
    """User signup request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str | None = Field(None, max_length=255)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None
    full_name: str | None
    picture: str | None
    phone: str | None
    is_admin: bool
    is_public: bool
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Authentication response with tokens and user info."""

    success: bool = True
    access_token: str
    refresh_token: str
    token_type: str = "bearer"  # noqa: S105
    expires_in: int
    user: UserResponse


class AccessTokenResponse(BaseModel):
    """Fresh access token issued from a refresh token or an OAuth callback."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    expires_in: int
