"""Security event trail for the credential lifecycle."""

import json
import logging

from sqlalchemy.orm import Session

from authcore.models.security_audit_log import SecurityAuditLog

logger = logging.getLogger(__name__)


class SecurityEventType:
    """Constants for security event types."""

    REGISTERED = "registered"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_BLOCKED_BANNED = "login_blocked_banned"
    TOKEN_REFRESHED = "token_refreshed"
    REFRESH_TOKEN_REUSE = "refresh_token_reuse"
    LOGOUT = "logout"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"
    ACCOUNT_DELETED = "account_deleted"


class SecurityAuditService:
    """Records security events for one request.

    Entries are added to the caller's session; the caller commits them
    together with the change they describe. Never pass secrets in details.
    """

    def __init__(
        self, db: Session, ip_address: str | None = None, user_agent: str | None = None
    ) -> None:
        self._db = db
        self.ip_address = ip_address
        self.user_agent = user_agent

    @classmethod
    def from_request(cls, db: Session, request) -> "SecurityAuditService":
        """Bind the trail to the client address and agent of a FastAPI request."""
        ip_address = None
        user_agent = None
        if request is not None:
            forwarded_for = request.headers.get("X-Forwarded-For")
            if forwarded_for:
                ip_address = forwarded_for.split(",")[0].strip()
            elif request.client:
                ip_address = request.client.host
            user_agent = request.headers.get("User-Agent", "")[:500]
        return cls(db, ip_address, user_agent)

    def record(self, event_type: str, user_id: str | None = None, **details) -> None:
        """Add an audit entry and mirror it to the application log."""
        self._db.add(
            SecurityAuditLog(
                user_id=user_id,
                event_type=event_type,
                ip_address=self.ip_address,
                user_agent=self.user_agent,
                details=json.dumps(details, default=str) if details else None,
            )
        )
        logger.info(f"Security event: {event_type} | user_id={user_id} | ip={self.ip_address}")
