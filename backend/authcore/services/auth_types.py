"""Value objects returned by the authentication services."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from authcore.schemas.auth import UserSummary


class TokenType(str, Enum):
    """Token kinds; each kind is signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPair:
    """Access/refresh token pair issued together."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful register or login."""

    user: UserSummary
    tokens: TokenPair


@dataclass(frozen=True)
class PasswordResetRequest:
    """Outcome of a reset request.

    `message` is the same whether or not the phone is registered;
    `reset_token` is the raw secret and only set for a registered phone.
    """

    message: str
    reset_token: str | None = None
    expires_at: datetime | None = None
