"""SQLAlchemy ORM models."""

from authcore.models.security_audit_log import SecurityAuditLog
from authcore.models.user import User, UserStatus

__all__ = [
    "SecurityAuditLog",
    "User",
    "UserStatus",
]
