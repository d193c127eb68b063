"""User data access layer."""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, undefer

from authcore.models import User

from .exceptions import DuplicateError, NotFoundError

logger = logging.getLogger(__name__)

# Columns guarded by a unique constraint, keyed by the fragments that show up
# in driver error messages (constraint name on PostgreSQL, table.column on SQLite).
_UNIQUE_FIELDS = {
    "phone": ("uq_users_phone", "users.phone"),
    "username": ("uq_users_username", "users.username"),
}


def _duplicate_field(error: IntegrityError) -> str | None:
    """Work out which unique column an IntegrityError refers to."""
    message = str(error.orig)
    for field, markers in _UNIQUE_FIELDS.items():
        if any(marker in message for marker in markers):
            return field
    return None


class UserRepository:
    """Generic user store: create, find_one, find_by_id, update, delete.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises exception if missing

    Credential-specific reads and writes live in `credentials` as free
    functions built on top of these capabilities.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    @property
    def db(self) -> Session:
        return self._db

    def create(self, user: User) -> User:
        """Insert a user, translating unique violations into DuplicateError."""
        self._db.add(user)
        try:
            self._db.flush()
        except IntegrityError as e:
            field = _duplicate_field(e)
            value = getattr(user, field) if field else None
            self._db.rollback()
            logger.info(f"Unique constraint rejected user insert: field={field}")
            raise DuplicateError("User", field, value) from e
        return user

    def find_one(self, *criteria: Any, include: Iterable[Any] = ()) -> User | None:
        """Find the first user matching all criteria.

        `include` lists deferred credential columns to load eagerly.
        """
        query = self._db.query(User).filter(*criteria)
        options = [undefer(column) for column in include]
        if options:
            query = query.options(*options)
        return query.first()

    def find_by_id(self, user_id: str, include: Iterable[Any] = ()) -> User | None:
        """Find user by primary key."""
        return self.find_one(User.id == user_id, include=include)

    def get_by_id(self, user_id: str) -> User:
        """Get user by primary key or raise NotFoundError."""
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def update(self, user_id: str, values: dict[str, Any], *criteria: Any) -> int:
        """Conditionally update one user row and return the number of rows changed.

        Extra criteria turn the update into a compare-and-swap. The statement
        bypasses the identity map, so loaded users are expired afterwards.
        """
        statement = (
            update(User)
            .where(User.id == user_id, *criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self._db.execute(statement)
        self._db.expire_all()
        return result.rowcount

    def delete(self, user: User) -> None:
        """Delete a user row."""
        self._db.delete(user)
        self._db.flush()

    def commit(self) -> None:
        self._db.commit()

    def rollback(self) -> None:
        self._db.rollback()
