"""Schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

PHONE_PATTERN = r"^[0-9]{10}$"


class UserRegister(BaseModel):
    """Schema for user registration."""

    username: str = Field(min_length=2, max_length=100)
    phone: str = Field(pattern=PHONE_PATTERN)
    password: str = Field(min_length=6, max_length=50)
    confirm_password: str


class UserLogin(BaseModel):
    """Schema for user login."""

    phone: str
    password: str


class UserSummary(BaseModel):
    """Public view of a user; never carries credential fields."""

    id: str
    username: str
    phone: str
    status: str
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class TokenRefresh(BaseModel):
    """Schema for token refresh."""

    refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(TokenResponse):
    """Schema for register/login responses."""

    user: UserSummary


class MessageResponse(BaseModel):
    """Schema for simple message response."""

    message: str


class ForgotPasswordRequest(BaseModel):
    """Schema for requesting password reset."""

    phone: str


class ForgotPasswordResponse(BaseModel):
    """Reset request response; reset_token only appears when exposure is enabled."""

    message: str
    reset_token: str | None = None


class ResetPasswordRequest(BaseModel):
    """Schema for resetting password with token."""

    reset_token: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=50)
    confirm_password: str


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str
