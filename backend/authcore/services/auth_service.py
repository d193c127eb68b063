"""Authentication service for password hashing and JWT management."""

import hashlib
import hmac
import logging
import secrets
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import bcrypt
import jwt

from authcore.config import settings
from authcore.services.auth_types import TokenPair, TokenType
from authcore.services.errors import (
    TokenExpiredError,
    TokenMalformedError,
    TokenSignatureError,
)

logger = logging.getLogger(__name__)

BCRYPT_MAX_PASSWORD_BYTES = 72


class AuthService:
    """Service for authentication primitives.

    Holds no persisted state: hashing, reset secrets, token issue and
    token verification are all pure functions of their inputs and settings.
    """

    # Pre-computed bcrypt hash for timing-consistent password verification
    # Used when no user has the phone so both login failures cost one bcrypt check
    _DUMMY_HASH = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.VTtYA9dWQ6E3Ky"

    @staticmethod
    def get_dummy_hash() -> str:
        """Get a dummy password hash for timing-consistent verification."""
        return AuthService._DUMMY_HASH

    @staticmethod
    def _password_bytes(password: str) -> bytes:
        # bcrypt only reads the first 72 bytes; newer releases reject longer input
        return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt with a fresh salt."""
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(AuthService._password_bytes(password), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(AuthService._password_bytes(password), hashed.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    @staticmethod
    def hash_token(token: str) -> str:
        """Deterministic SHA-256 digest used to store and look up tokens."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def verify_token_hash(token: str, hashed: str | None) -> bool:
        """Verify a token against its stored SHA-256 digest."""
        if not hashed:
            return False
        return hmac.compare_digest(AuthService.hash_token(token), hashed)

    @staticmethod
    def generate_reset_token() -> str:
        """Generate an opaque password reset secret."""
        return secrets.token_hex(settings.password_reset_token_bytes)

    @staticmethod
    def _secret_for(token_type: TokenType) -> str:
        if token_type is TokenType.ACCESS:
            return settings.jwt_access_secret
        return settings.jwt_refresh_secret

    @staticmethod
    def _create_token(user_id: str, token_type: TokenType, expires_delta: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "type": token_type.value,
            "iat": now,
            "exp": now + expires_delta,
            "jti": uuid4().hex,
        }
        return jwt.encode(
            payload, AuthService._secret_for(token_type), algorithm=settings.jwt_algorithm
        )

    @staticmethod
    def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
        """Create a short-lived JWT access token."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
        return AuthService._create_token(user_id, TokenType.ACCESS, expires_delta)

    @staticmethod
    def create_refresh_token(user_id: str, expires_delta: timedelta | None = None) -> str:
        """Create a long-lived JWT refresh token."""
        if expires_delta is None:
            expires_delta = timedelta(days=settings.refresh_token_expire_days)
        return AuthService._create_token(user_id, TokenType.REFRESH, expires_delta)

    @staticmethod
    def issue_token_pair(user_id: str) -> TokenPair:
        """Issue a fresh access/refresh token pair for a user."""
        return TokenPair(
            access_token=AuthService.create_access_token(user_id),
            refresh_token=AuthService.create_refresh_token(user_id),
        )

    @staticmethod
    def verify_token(token: str, token_type: TokenType) -> str:
        """Validate signature, expiry and kind of a token and return its user id.

        Raises:
            TokenExpiredError: the token's exp has passed
            TokenSignatureError: the token was not signed with this kind's secret
            TokenMalformedError: anything else (undecodable, wrong kind, missing claims)
        """
        try:
            payload = jwt.decode(
                token,
                AuthService._secret_for(token_type),
                algorithms=[settings.jwt_algorithm],
                options={"require": ["exp", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.debug(f"{token_type.value} token expired")
            raise TokenExpiredError() from e
        except jwt.InvalidSignatureError as e:
            logger.debug(f"{token_type.value} token has a bad signature")
            raise TokenSignatureError() from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid {token_type.value} token: {e}")
            raise TokenMalformedError() from e

        if payload.get("type") != token_type.value:
            logger.debug(f"Token type {payload.get('type')!r} presented as {token_type.value}")
            raise TokenMalformedError()

        user_id = payload["sub"]
        if not isinstance(user_id, str) or not user_id:
            raise TokenMalformedError()
        return user_id
