"""Shared test fixtures: in-memory database, repository, services and API client."""

import os

# Must be set before authcore builds its engine from settings
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from authcore.config import settings
from authcore.database import get_db
from authcore.init_db import create_tables
from authcore.main import app
from authcore.services.password_reset_service import PasswordResetService
from authcore.services.repositories import UserRepository
from authcore.services.session_service import SessionService

ALICE = {
    "username": "alice",
    "phone": "9998887770",
    "password": "secret1",
    "confirm_password": "secret1",
}


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Use the cheapest bcrypt work factor in tests."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture
def engine():
    """Create in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_maker):
    """Create database session for testing."""
    session = session_maker()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db) -> UserRepository:
    return UserRepository(db)


@pytest.fixture
def sessions(users) -> SessionService:
    return SessionService(users)


@pytest.fixture
def resets(users) -> PasswordResetService:
    return PasswordResetService(users)


@pytest.fixture
def alice(sessions):
    """Register alice and return the AuthResult."""
    return sessions.register(**ALICE)


@pytest.fixture
def client(session_maker):
    """Create test client with the in-memory database.

    Yields a tuple of (TestClient, SessionMaker) for use in tests.
    """

    def override_get_db():
        db = session_maker()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client, session_maker

    app.dependency_overrides.clear()
