"""Tests for PasswordResetService."""

from datetime import UTC, datetime, timedelta

import pytest

from authcore.config import settings
from authcore.models import User
from authcore.services.auth_service import AuthService
from authcore.services.errors import (
    InvalidCredentialsError,
    InvalidOrExpiredResetTokenError,
    PasswordMismatchError,
    TokenReuseDetectedError,
)
from authcore.services.password_reset_service import RESET_REQUESTED_MESSAGE
from authcore.services.repositories import credentials
from tests.conftest import ALICE


def reset_fields(users, user_id):
    user = users.find_by_id(
        user_id, include=(User.password_reset_token_hash, User.password_reset_expires_at)
    )
    return user.password_reset_token_hash, user.password_reset_expires_at


class TestRequestReset:
    def test_request_reset_returns_token(self, alice, resets):
        result = resets.request_reset(ALICE["phone"])

        assert result.message == RESET_REQUESTED_MESSAGE
        assert result.reset_token
        assert len(result.reset_token) == settings.password_reset_token_bytes * 2

    def test_request_reset_stores_digest_not_token(self, alice, resets, users):
        result = resets.request_reset(ALICE["phone"])
        token_hash, expires_at = reset_fields(users, alice.user.id)

        assert token_hash == AuthService.hash_token(result.reset_token)
        assert token_hash != result.reset_token
        assert expires_at is not None

    def test_request_reset_expiry_is_one_hour(self, alice, resets):
        before = datetime.now(UTC)
        result = resets.request_reset(ALICE["phone"])

        assert result.expires_at - before >= timedelta(minutes=59)
        assert result.expires_at - before <= timedelta(minutes=61)

    def test_unknown_phone_same_message_no_token(self, resets):
        result = resets.request_reset("0000000000")

        assert result.message == RESET_REQUESTED_MESSAGE
        assert result.reset_token is None
        assert result.expires_at is None

    def test_new_request_replaces_previous(self, alice, resets):
        first = resets.request_reset(ALICE["phone"])
        second = resets.request_reset(ALICE["phone"])

        with pytest.raises(InvalidOrExpiredResetTokenError):
            resets.consume_reset(first.reset_token, "newpass1", "newpass1")
        resets.consume_reset(second.reset_token, "newpass1", "newpass1")

    def test_request_reset_keeps_session(self, alice, resets, sessions):
        resets.request_reset(ALICE["phone"])
        assert sessions.rotate(alice.tokens.refresh_token).refresh_token


class TestConsumeReset:
    def test_consume_reset_changes_password(self, alice, resets, sessions):
        token = resets.request_reset(ALICE["phone"]).reset_token

        resets.consume_reset(token, "newpass1", "newpass1")

        assert sessions.login(ALICE["phone"], "newpass1").user.id == alice.user.id
        with pytest.raises(InvalidCredentialsError):
            sessions.login(ALICE["phone"], ALICE["password"])

    def test_consume_reset_clears_reset_fields(self, alice, resets, users):
        token = resets.request_reset(ALICE["phone"]).reset_token
        resets.consume_reset(token, "newpass1", "newpass1")

        assert reset_fields(users, alice.user.id) == (None, None)

    def test_consume_reset_revokes_session(self, alice, resets, sessions, users):
        token = resets.request_reset(ALICE["phone"]).reset_token
        resets.consume_reset(token, "newpass1", "newpass1")

        assert credentials.find_by_id_with_refresh_token(users, alice.user.id).refresh_token_hash is None
        with pytest.raises(TokenReuseDetectedError):
            sessions.rotate(alice.tokens.refresh_token)

    def test_consume_reset_twice(self, alice, resets):
        """A reset token is single-use."""
        token = resets.request_reset(ALICE["phone"]).reset_token
        resets.consume_reset(token, "newpass1", "newpass1")

        with pytest.raises(InvalidOrExpiredResetTokenError):
            resets.consume_reset(token, "newpass2", "newpass2")

    def test_consume_reset_after_expiry(self, alice, resets, users, sessions):
        token = resets.request_reset(ALICE["phone"]).reset_token
        users.update(
            alice.user.id, {"password_reset_expires_at": datetime.now(UTC) - timedelta(seconds=1)}
        )
        users.commit()

        with pytest.raises(InvalidOrExpiredResetTokenError):
            resets.consume_reset(token, "newpass1", "newpass1")
        assert sessions.login(ALICE["phone"], ALICE["password"])

    def test_consume_reset_password_mismatch(self, alice, resets):
        token = resets.request_reset(ALICE["phone"]).reset_token

        with pytest.raises(PasswordMismatchError):
            resets.consume_reset(token, "newpass1", "newpass2")
        # token still usable
        resets.consume_reset(token, "newpass1", "newpass1")

    def test_consume_unknown_token(self, alice, resets):
        with pytest.raises(InvalidOrExpiredResetTokenError):
            resets.consume_reset(AuthService.generate_reset_token(), "newpass1", "newpass1")

    def test_consume_reset_lost_race(self, alice, resets, sessions, monkeypatch):
        token = resets.request_reset(ALICE["phone"]).reset_token
        monkeypatch.setattr(credentials, "complete_password_reset", lambda *args: False)

        with pytest.raises(InvalidOrExpiredResetTokenError):
            resets.consume_reset(token, "newpass1", "newpass1")
        assert sessions.login(ALICE["phone"], ALICE["password"])
