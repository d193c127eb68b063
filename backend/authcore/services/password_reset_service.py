"""Password reset by single-use token."""

import logging
from datetime import UTC, datetime, timedelta

from authcore.config import settings
from authcore.services.auth_service import AuthService
from authcore.services.auth_types import PasswordResetRequest
from authcore.services.errors import InvalidOrExpiredResetTokenError, PasswordMismatchError
from authcore.services.repositories import UserRepository, credentials
from authcore.services.security_audit_service import SecurityAuditService, SecurityEventType

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If that phone number is registered, password reset instructions will be sent."


class PasswordResetService:
    """Issue and consume password reset tokens.

    Only the SHA-256 digest of a reset token is stored, next to its expiry.
    The raw token is handed back once, to be delivered to the user.
    """

    def __init__(self, users: UserRepository, audit: SecurityAuditService | None = None) -> None:
        self._users = users
        self._audit = audit or SecurityAuditService(users.db)

    def request_reset(self, phone: str) -> PasswordResetRequest:
        """Start a reset for the user owning `phone`.

        Unknown phones get the same message and no token, so the outcome
        does not reveal whether the phone is registered.
        """
        user = credentials.find_by_phone(self._users, phone)
        if user is None:
            logger.info("Password reset requested for unknown phone")
            return PasswordResetRequest(message=RESET_REQUESTED_MESSAGE)

        reset_token = AuthService.generate_reset_token()
        expires_at = datetime.now(UTC) + timedelta(minutes=settings.password_reset_expire_minutes)
        user_id = user.id
        credentials.set_reset_token(
            self._users, user_id, AuthService.hash_token(reset_token), expires_at
        )
        self._audit.record(SecurityEventType.PASSWORD_RESET_REQUESTED, user_id=user_id)
        self._users.commit()

        logger.info(f"Password reset token issued for user {user_id}")
        return PasswordResetRequest(
            message=RESET_REQUESTED_MESSAGE, reset_token=reset_token, expires_at=expires_at
        )

    def consume_reset(self, reset_token: str, new_password: str, confirm_password: str) -> None:
        """Set a new password with a pending reset token.

        Clears the reset token and the live refresh token, so every existing
        session has to log in again.
        """
        if new_password != confirm_password:
            raise PasswordMismatchError()

        token_hash = AuthService.hash_token(reset_token)
        user = credentials.find_by_reset_token_hash(self._users, token_hash, valid_only=True)
        if user is None:
            raise InvalidOrExpiredResetTokenError()

        user_id = user.id
        completed = credentials.complete_password_reset(
            self._users, user_id, token_hash, AuthService.hash_password(new_password)
        )
        if not completed:
            # Another request consumed the token between lookup and update
            self._users.rollback()
            raise InvalidOrExpiredResetTokenError()

        self._audit.record(SecurityEventType.PASSWORD_RESET_COMPLETED, user_id=user_id)
        self._users.commit()
        logger.info(f"Password reset completed for user {user_id}")
