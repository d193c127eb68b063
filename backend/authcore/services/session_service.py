"""Registration, login and refresh-token rotation.

Every user holds at most one live refresh token. Login and registration
overwrite it, rotation swaps it with a compare-and-swap update, and logout
clears it. A refresh token that verifies but is not the stored one has
already been rotated away (or revoked), so presenting it again is reported
as reuse.
"""

import logging
from datetime import UTC, datetime

from authcore.models import User, UserStatus
from authcore.schemas.auth import UserSummary
from authcore.services.auth_service import AuthService
from authcore.services.auth_types import AuthResult, TokenPair, TokenType
from authcore.services.errors import (
    AccountBannedError,
    DuplicateIdentityError,
    EntityNotFoundError,
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordMismatchError,
    PrincipalNotFoundError,
    TokenReuseDetectedError,
)
from authcore.services.repositories import DuplicateError, UserRepository, credentials
from authcore.services.security_audit_service import SecurityAuditService, SecurityEventType

logger = logging.getLogger(__name__)


class SessionService:
    """Session lifecycle for a single request's unit of work."""

    def __init__(self, users: UserRepository, audit: SecurityAuditService | None = None) -> None:
        self._users = users
        self._audit = audit or SecurityAuditService(users.db)

    def register(
        self, username: str, phone: str, password: str, confirm_password: str
    ) -> AuthResult:
        """Create an active user and open its first session."""
        if password != confirm_password:
            raise PasswordMismatchError()

        if credentials.find_by_phone(self._users, phone):
            raise DuplicateIdentityError("phone")
        if credentials.find_by_username(self._users, username):
            raise DuplicateIdentityError("username")

        user = User(
            username=username,
            phone=phone,
            password_hash=AuthService.hash_password(password),
            status=UserStatus.ACTIVE.value,
        )
        try:
            self._users.create(user)
        except DuplicateError as e:
            # Lost a race with a concurrent registration; the constraint is authoritative
            raise DuplicateIdentityError(e.field or "phone") from e

        summary = UserSummary.model_validate(user)
        tokens = AuthService.issue_token_pair(user.id)
        credentials.set_refresh_token(
            self._users, user.id, AuthService.hash_token(tokens.refresh_token)
        )
        self._audit.record(SecurityEventType.REGISTERED, user_id=user.id)
        self._users.commit()

        logger.info(f"User registered: {summary.username} ({summary.id})")
        return AuthResult(user=summary, tokens=tokens)

    def login(self, phone: str, password: str) -> AuthResult:
        """Authenticate by phone and password and replace the live session."""
        user = credentials.find_by_phone_with_password(self._users, phone)
        if user is None:
            # Same bcrypt cost as a real check so unknown phones are not cheaper to probe
            AuthService.verify_password(password, AuthService.get_dummy_hash())
            self._record_failure(SecurityEventType.LOGIN_FAILED, None, reason="user_not_found")
            raise InvalidCredentialsError()

        if not AuthService.verify_password(password, user.password_hash):
            self._record_failure(SecurityEventType.LOGIN_FAILED, user.id, reason="invalid_password")
            raise InvalidCredentialsError()

        if user.is_banned:
            self._record_failure(SecurityEventType.LOGIN_BLOCKED_BANNED, user.id)
            raise AccountBannedError()

        logged_in_at = datetime.now(UTC)
        summary = UserSummary.model_validate(user).model_copy(
            update={"last_login_at": logged_in_at}
        )
        tokens = AuthService.issue_token_pair(user.id)
        credentials.record_login(
            self._users, user.id, AuthService.hash_token(tokens.refresh_token), logged_in_at
        )
        self._audit.record(SecurityEventType.LOGIN_SUCCESS, user_id=user.id)
        self._users.commit()

        logger.info(f"User logged in: {summary.username} ({summary.id})")
        return AuthResult(user=summary, tokens=tokens)

    def rotate(self, refresh_token: str) -> TokenPair:
        """Exchange the live refresh token for a new pair.

        Raises:
            InvalidTokenError: signature, expiry or format check failed
            PrincipalNotFoundError: the token's user no longer exists
            TokenReuseDetectedError: the token is not the user's live refresh token
        """
        try:
            user_id = AuthService.verify_token(refresh_token, TokenType.REFRESH)
        except InvalidTokenError as e:
            logger.info(f"Refresh rejected: {type(e).__name__}")
            raise

        user = credentials.find_by_id_with_refresh_token(self._users, user_id)
        if user is None:
            raise PrincipalNotFoundError()

        presented_hash = AuthService.hash_token(refresh_token)
        if not AuthService.verify_token_hash(refresh_token, user.refresh_token_hash):
            self._record_reuse(user_id, reason="not_live_token")
            raise TokenReuseDetectedError()

        tokens = AuthService.issue_token_pair(user_id)
        swapped = credentials.swap_refresh_token(
            self._users, user_id, presented_hash, AuthService.hash_token(tokens.refresh_token)
        )
        if not swapped:
            self._record_reuse(user_id, reason="concurrent_rotation")
            raise TokenReuseDetectedError()

        self._audit.record(SecurityEventType.TOKEN_REFRESHED, user_id=user_id)
        self._users.commit()

        logger.debug(f"Refresh token rotated for user {user_id}")
        return tokens

    def logout(self, user_id: str) -> None:
        """Clear the live refresh token. Idempotent."""
        credentials.set_refresh_token(self._users, user_id, None)
        self._audit.record(SecurityEventType.LOGOUT, user_id=user_id)
        self._users.commit()
        logger.info(f"User logged out: {user_id}")

    def delete_account(self, user_id: str) -> None:
        """Permanently delete a user together with its credentials."""
        user = self._users.find_by_id(user_id)
        if user is None:
            raise EntityNotFoundError()

        self._users.delete(user)
        self._audit.record(SecurityEventType.ACCOUNT_DELETED, user_id=user_id)
        self._users.commit()
        logger.info(f"Account deleted: {user_id}")

    def _record_failure(self, event_type: str, user_id: str | None, **details) -> None:
        self._audit.record(event_type, user_id=user_id, **details)
        self._users.commit()

    def _record_reuse(self, user_id: str, reason: str) -> None:
        logger.warning(f"Refresh token reuse detected for user {user_id} ({reason})")
        self._record_failure(SecurityEventType.REFRESH_TOKEN_REUSE, user_id, reason=reason)
