"""Authentication errors raised by the credential and session services.

Each error carries a `kind` shared by every error the boundary should treat
the same way. Token failures keep distinct subclasses internally but share
one kind and one message externally.
"""


class AuthError(Exception):
    """Base exception for authentication operations."""

    kind = "auth_error"
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PasswordMismatchError(AuthError):
    kind = "validation_failure"
    default_message = "Passwords do not match"


class DuplicateIdentityError(AuthError):
    """Phone or username already belongs to another user."""

    kind = "duplicate_identity"

    _MESSAGES = {
        "phone": "Phone number already registered",
        "username": "Username already taken",
    }

    def __init__(self, field: str):
        self.field = field
        super().__init__(self._MESSAGES.get(field, f"{field.capitalize()} already exists"))


class InvalidCredentialsError(AuthError):
    """Unknown phone or wrong password; deliberately indistinguishable."""

    kind = "invalid_credentials"
    default_message = "Invalid phone number or password"


class AccountBannedError(AuthError):
    kind = "account_banned"
    default_message = "User account is banned"


class InvalidTokenError(AuthError):
    kind = "invalid_token"
    default_message = "Invalid or expired token"


class TokenExpiredError(InvalidTokenError):
    pass


class TokenMalformedError(InvalidTokenError):
    pass


class TokenSignatureError(InvalidTokenError):
    pass


class TokenReuseDetectedError(InvalidTokenError):
    """A refresh token that is no longer the live one was presented."""


class PrincipalNotFoundError(AuthError):
    kind = "principal_not_found"
    default_message = "User not found"


class InvalidOrExpiredResetTokenError(AuthError):
    kind = "invalid_or_expired_reset_token"
    default_message = "Invalid or expired reset token"


class EntityNotFoundError(AuthError):
    kind = "not_found"
    default_message = "User not found"
