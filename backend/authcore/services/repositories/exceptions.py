"""Repository-specific exceptions.

These exceptions describe data access failures in storage terms
(missing row, unique constraint hit). Services translate them into
authentication errors.
"""


class RepositoryError(Exception):
    """Base exception for repository operations."""


class NotFoundError(RepositoryError):
    """Entity not found in database."""

    def __init__(self, entity_type: str, identifier: str | int):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} not found: {identifier}")


class DuplicateError(RepositoryError):
    """Insert rejected by a unique constraint.

    `field` is the column whose constraint fired, or None when the
    database error could not be attributed to a known column.
    """

    def __init__(self, entity_type: str, field: str | None, value: str | None = None):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with duplicate {field or 'key'} already exists")
