"""Tests for UserRepository and the credential query functions."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import inspect

from authcore.models import User
from authcore.services.repositories import DuplicateError, NotFoundError, credentials


@pytest.fixture
def test_user(users):
    """Create a test user."""
    user = User(
        id="user-123",
        username="alice",
        phone="9998887770",
        password_hash="hashed",
        refresh_token_hash="a" * 64,
    )
    users.create(user)
    users.commit()
    return user


class TestUserRepository:
    """Test cases for the generic capabilities."""

    def test_create_assigns_defaults(self, test_user):
        assert test_user.id == "user-123"
        assert test_user.status == "active"

    def test_create_duplicate_phone(self, test_user, users):
        with pytest.raises(DuplicateError) as exc_info:
            users.create(User(username="bob", phone="9998887770", password_hash="h"))
        assert exc_info.value.field == "phone"
        assert exc_info.value.value == "9998887770"

    def test_create_duplicate_username(self, test_user, users):
        with pytest.raises(DuplicateError) as exc_info:
            users.create(User(username="alice", phone="1112223334", password_hash="h"))
        assert exc_info.value.field == "username"

    def test_find_by_id(self, test_user, users):
        assert users.find_by_id("user-123").username == "alice"
        assert users.find_by_id("missing") is None

    def test_get_by_id_missing(self, users):
        with pytest.raises(NotFoundError):
            users.get_by_id("missing")

    def test_credential_columns_are_deferred(self, test_user, session_maker):
        """Plain reads do not load password or token material."""
        db = session_maker()
        user = db.query(User).filter(User.id == "user-123").first()
        unloaded = inspect(user).unloaded

        assert "password_hash" in unloaded
        assert "refresh_token_hash" in unloaded
        assert "password_reset_token_hash" in unloaded
        assert "username" not in unloaded
        db.close()

    def test_find_one_include_loads_column(self, test_user, session_maker):
        from authcore.services.repositories import UserRepository

        db = session_maker()
        user = UserRepository(db).find_one(User.phone == "9998887770", include=(User.password_hash,))

        assert "password_hash" not in inspect(user).unloaded
        assert user.password_hash == "hashed"
        db.close()

    def test_update_returns_rowcount(self, test_user, users):
        assert users.update("user-123", {"status": "inactive"}) == 1
        assert users.update("missing", {"status": "inactive"}) == 0
        assert users.find_by_id("user-123").status == "inactive"

    def test_update_with_criteria(self, test_user, users):
        assert users.update("user-123", {"status": "banned"}, User.status == "inactive") == 0
        assert users.find_by_id("user-123").status == "active"

    def test_delete(self, test_user, users):
        users.delete(users.get_by_id("user-123"))
        users.commit()
        assert users.find_by_id("user-123") is None


class TestCredentials:
    """Test cases for credential-specific functions."""

    def test_find_by_phone_and_username(self, test_user, users):
        assert credentials.find_by_phone(users, "9998887770").id == "user-123"
        assert credentials.find_by_username(users, "alice").id == "user-123"
        assert credentials.find_by_phone(users, "0000000000") is None

    def test_swap_refresh_token_matching(self, test_user, users):
        assert credentials.swap_refresh_token(users, "user-123", "a" * 64, "b" * 64) is True
        assert credentials.find_by_id_with_refresh_token(users, "user-123").refresh_token_hash == "b" * 64

    def test_swap_refresh_token_stale(self, test_user, users):
        """Only one of two swaps from the same old token can win."""
        assert credentials.swap_refresh_token(users, "user-123", "a" * 64, "b" * 64) is True
        assert credentials.swap_refresh_token(users, "user-123", "a" * 64, "c" * 64) is False
        assert credentials.find_by_id_with_refresh_token(users, "user-123").refresh_token_hash == "b" * 64

    def test_set_refresh_token_clears(self, test_user, users):
        assert credentials.set_refresh_token(users, "user-123", None) is True
        assert credentials.find_by_id_with_refresh_token(users, "user-123").refresh_token_hash is None

    def test_record_login(self, test_user, users):
        now = datetime.now(UTC)
        assert credentials.record_login(users, "user-123", "d" * 64, now) is True

        user = credentials.find_by_id_with_refresh_token(users, "user-123")
        assert user.refresh_token_hash == "d" * 64
        assert user.last_login_at is not None

    def test_find_by_reset_token_hash_valid(self, test_user, users):
        credentials.set_reset_token(users, "user-123", "r" * 64, datetime.now(UTC) + timedelta(hours=1))

        assert credentials.find_by_reset_token_hash(users, "r" * 64).id == "user-123"
        assert credentials.find_by_reset_token_hash(users, "x" * 64) is None

    def test_find_by_reset_token_hash_expired(self, test_user, users):
        credentials.set_reset_token(users, "user-123", "r" * 64, datetime.now(UTC) - timedelta(seconds=1))

        assert credentials.find_by_reset_token_hash(users, "r" * 64) is None
        # stale entries stay in place until replaced or consumed
        assert credentials.find_by_reset_token_hash(users, "r" * 64, valid_only=False).id == "user-123"

    def test_find_by_reset_token_hash_custom_now(self, test_user, users):
        expires_at = datetime.now(UTC) + timedelta(hours=1)
        credentials.set_reset_token(users, "user-123", "r" * 64, expires_at)

        later = expires_at + timedelta(seconds=1)
        assert credentials.find_by_reset_token_hash(users, "r" * 64, now=later) is None

    def test_complete_password_reset(self, test_user, users):
        credentials.set_reset_token(users, "user-123", "r" * 64, datetime.now(UTC) + timedelta(hours=1))

        assert credentials.complete_password_reset(users, "user-123", "r" * 64, "new-hash") is True
        assert credentials.complete_password_reset(users, "user-123", "r" * 64, "other") is False

        user = users.find_by_id(
            "user-123",
            include=(
                User.password_hash,
                User.refresh_token_hash,
                User.password_reset_token_hash,
                User.password_reset_expires_at,
            ),
        )
        assert user.password_hash == "new-hash"
        assert user.refresh_token_hash is None
        assert user.password_reset_token_hash is None
        assert user.password_reset_expires_at is None
