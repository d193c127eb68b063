"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, status

from authcore.config import settings
from authcore.dependencies.auth import get_current_user
from authcore.dependencies.services import get_password_reset_service, get_session_service
from authcore.models.user import User
from authcore.schemas.auth import (
    AuthResponse,
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
from authcore.services.auth_types import AuthResult
from authcore.services.password_reset_service import PasswordResetService
from authcore.services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        user=result.user,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: UserRegister, sessions: SessionService = Depends(get_session_service)
) -> AuthResponse:
    """Register a new user and open a session."""
    result = sessions.register(data.username, data.phone, data.password, data.confirm_password)
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(data: UserLogin, sessions: SessionService = Depends(get_session_service)) -> AuthResponse:
    """Login and get access/refresh tokens."""
    return _auth_response(sessions.login(data.phone, data.password))


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(
    data: TokenRefresh, sessions: SessionService = Depends(get_session_service)
) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    tokens = sessions.rotate(data.refresh_token)
    return TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    current_user: User = Depends(get_current_user),
    sessions: SessionService = Depends(get_session_service),
) -> dict:
    """Logout and revoke the refresh token."""
    sessions.logout(current_user.id)
    return {"message": "Logged out successfully"}


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
def forgot_password(
    data: ForgotPasswordRequest,
    resets: PasswordResetService = Depends(get_password_reset_service),
) -> ForgotPasswordResponse:
    """Request a password reset token."""
    result = resets.request_reset(data.phone)
    if settings.expose_reset_token and result.reset_token:
        return ForgotPasswordResponse(message=result.message, reset_token=result.reset_token)
    # TODO: deliver result.reset_token by SMS once a provider is configured
    return ForgotPasswordResponse(message=result.message)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    data: ResetPasswordRequest,
    resets: PasswordResetService = Depends(get_password_reset_service),
) -> dict:
    """Reset password with a reset token."""
    resets.consume_reset(data.reset_token, data.new_password, data.confirm_password)
    return {"message": "Password updated successfully. Please login again."}


@router.delete("/delete-account", response_model=MessageResponse)
def delete_account(
    current_user: User = Depends(get_current_user),
    sessions: SessionService = Depends(get_session_service),
) -> dict:
    """Permanently delete the current user's account."""
    sessions.delete_account(current_user.id)
    return {"message": "Account deleted successfully"}


@router.get("/me", response_model=UserSummary)
def get_me(current_user: User = Depends(get_current_user)) -> User:
    """Get the current authenticated user's information."""
    return current_user
