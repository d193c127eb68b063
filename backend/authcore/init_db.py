"""Database initialization script."""

import logging

from sqlalchemy.engine import Engine

from authcore.database import Base, engine
from authcore.models import SecurityAuditLog, User  # noqa: F401  registers tables

logger = logging.getLogger(__name__)


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Tables created: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
