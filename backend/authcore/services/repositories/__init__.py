"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services. Services should use repositories for data access rather
than directly querying SQLAlchemy models.

- UserRepository: generic capabilities (create, find_one, find_by_id, update, delete)
- credentials: credential-specific queries and conditional writes as free functions

Dependency direction: Services -> Repositories -> Models
"""

from . import credentials
from .exceptions import DuplicateError, NotFoundError, RepositoryError
from .user_repository import UserRepository

__all__ = [
    "DuplicateError",
    "NotFoundError",
    "RepositoryError",
    "UserRepository",
    "credentials",
]
