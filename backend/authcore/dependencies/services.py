"""Per-request wiring of repositories and services."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from authcore.database import get_db
from authcore.services.password_reset_service import PasswordResetService
from authcore.services.repositories import UserRepository
from authcore.services.security_audit_service import SecurityAuditService
from authcore.services.session_service import SessionService


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_security_audit(request: Request, db: Session = Depends(get_db)) -> SecurityAuditService:
    return SecurityAuditService.from_request(db, request)


def get_session_service(
    users: UserRepository = Depends(get_user_repository),
    audit: SecurityAuditService = Depends(get_security_audit),
) -> SessionService:
    return SessionService(users, audit)


def get_password_reset_service(
    users: UserRepository = Depends(get_user_repository),
    audit: SecurityAuditService = Depends(get_security_audit),
) -> PasswordResetService:
    return PasswordResetService(users, audit)
