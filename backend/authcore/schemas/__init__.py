"""Pydantic schemas for API requests and responses."""

from authcore.schemas.auth import (
    AuthResponse,
    ErrorResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    MessageResponse,
    ResetPasswordRequest,
    TokenRefresh,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserSummary,
)

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "MessageResponse",
    "ResetPasswordRequest",
    "TokenRefresh",
    "TokenResponse",
    "UserLogin",
    "UserRegister",
    "UserSummary",
]
