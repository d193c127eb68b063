"""Credential reads and writes composed over the generic UserRepository.

Every writer returns whether a row changed; writers that take an
`expected_*` argument are compare-and-swap updates and return False when
another request changed the row first.
"""

from datetime import UTC, datetime

from authcore.models import User

from .user_repository import UserRepository


def find_by_phone(users: UserRepository, phone: str) -> User | None:
    """Find user by phone number."""
    return users.find_one(User.phone == phone)


def find_by_username(users: UserRepository, username: str) -> User | None:
    """Find user by username."""
    return users.find_one(User.username == username)


def find_by_phone_with_password(users: UserRepository, phone: str) -> User | None:
    """Find user by phone with the password hash loaded (login path only)."""
    return users.find_one(User.phone == phone, include=(User.password_hash,))


def find_by_id_with_refresh_token(users: UserRepository, user_id: str) -> User | None:
    """Find user by id with the stored refresh token digest loaded."""
    return users.find_by_id(user_id, include=(User.refresh_token_hash,))


def find_by_reset_token_hash(
    users: UserRepository,
    token_hash: str,
    valid_only: bool = True,
    now: datetime | None = None,
) -> User | None:
    """Find the user holding a reset token digest.

    With valid_only, a digest whose expiry is not strictly in the future
    is treated as absent.
    """
    criteria = [User.password_reset_token_hash == token_hash]
    if valid_only:
        criteria.append(User.password_reset_expires_at > (now or datetime.now(UTC)))
    return users.find_one(
        *criteria,
        include=(User.password_reset_token_hash, User.password_reset_expires_at),
    )


def set_refresh_token(users: UserRepository, user_id: str, token_hash: str | None) -> bool:
    """Unconditionally replace (or clear, with None) the live refresh token."""
    return users.update(user_id, {"refresh_token_hash": token_hash}) == 1


def record_login(
    users: UserRepository, user_id: str, token_hash: str, logged_in_at: datetime
) -> bool:
    """Store the new session's refresh token and the login timestamp."""
    values = {"refresh_token_hash": token_hash, "last_login_at": logged_in_at}
    return users.update(user_id, values) == 1


def swap_refresh_token(
    users: UserRepository, user_id: str, expected_hash: str, new_hash: str
) -> bool:
    """Replace the refresh token only if it still equals `expected_hash`."""
    changed = users.update(
        user_id,
        {"refresh_token_hash": new_hash},
        User.refresh_token_hash == expected_hash,
    )
    return changed == 1


def set_reset_token(
    users: UserRepository, user_id: str, token_hash: str, expires_at: datetime
) -> bool:
    """Store a pending reset, overwriting any earlier one."""
    values = {"password_reset_token_hash": token_hash, "password_reset_expires_at": expires_at}
    return users.update(user_id, values) == 1


def complete_password_reset(
    users: UserRepository, user_id: str, expected_token_hash: str, password_hash: str
) -> bool:
    """Set the new password and clear reset material and the live session.

    Guarded on the reset digest so a token can only be consumed once.
    """
    changed = users.update(
        user_id,
        {
            "password_hash": password_hash,
            "password_reset_token_hash": None,
            "password_reset_expires_at": None,
            "refresh_token_hash": None,
        },
        User.password_reset_token_hash == expected_token_hash,
    )
    return changed == 1
