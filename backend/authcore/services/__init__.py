"""Services layer - credential and session business logic.

- auth_service: password hashing, token issue and verification
- session_service: register, login, rotation, logout, account deletion
- password_reset_service: reset token request and consumption
- security_audit_service: security event trail
- repositories/: data access layer

Common imports for convenience:
    from authcore.services import SessionService, PasswordResetService
"""

from authcore.services.auth_service import AuthService
from authcore.services.password_reset_service import PasswordResetService
from authcore.services.repositories import (
    DuplicateError,
    NotFoundError,
    RepositoryError,
    UserRepository,
)
from authcore.services.security_audit_service import SecurityAuditService
from authcore.services.session_service import SessionService

__all__ = [
    "AuthService",
    "DuplicateError",
    "NotFoundError",
    "PasswordResetService",
    "RepositoryError",
    "SecurityAuditService",
    "SessionService",
    "UserRepository",
]
