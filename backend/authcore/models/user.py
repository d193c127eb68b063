"""User model holding the principal and its embedded credentials."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from authcore.database import Base


class UserStatus(str, Enum):
    """Account status of a user."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"


class User(Base):
    """User model representing authenticated principals.

    Credential columns are deferred: they are only loaded when a query asks
    for them explicitly, so ordinary reads never carry secrets around.

    - refresh_token_hash: SHA-256 of the single live refresh token (None = no session)
    - password_reset_token_hash / password_reset_expires_at: set and cleared together
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("phone", name="uq_users_phone"),
        UniqueConstraint("username", name="uq_users_username"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    username: Mapped[str] = mapped_column(String(100), index=True)
    phone: Mapped[str] = mapped_column(String(20), index=True)
    status: Mapped[str] = mapped_column(String(20), default=UserStatus.ACTIVE.value)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    password_hash: Mapped[str] = mapped_column(String(255), deferred=True)
    refresh_token_hash: Mapped[str | None] = mapped_column(String(64), deferred=True)
    password_reset_token_hash: Mapped[str | None] = mapped_column(
        String(64), index=True, deferred=True
    )
    password_reset_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), deferred=True
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    @property
    def is_banned(self) -> bool:
        return self.status == UserStatus.BANNED.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
