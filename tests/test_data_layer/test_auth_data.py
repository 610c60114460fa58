"""
Tests for user-loading and login data access (ORM).

Uses db_session fixture: in-memory SQLite, rolled back after each test.
"""
from __future__ import annotations

import pytest
from fastapi import HTTPException

from app.models.security import ROLE_ADMIN, ROLE_USER, User
from app.security.auth import authenticate, load_user
from app.security.passwords import PasswordHasher

_hasher = PasswordHasher(cost_factor=4)


def _add_user(db_session, username: str, password: str, roles: list[str] | None = None) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=_hasher.hash_password(password),
        roles=roles or [],
    )
    db_session.add(user)
    db_session.commit()
    return user


def test_load_user_returns_user_with_roles(db_session):
    user = _add_user(db_session, "testuser", "secret", [ROLE_ADMIN])

    loaded = load_user(db_session, user.id)

    assert loaded.id == user.id
    assert loaded.username == "testuser"
    assert loaded.roles == [ROLE_ADMIN]
    assert loaded.effective_roles == [ROLE_ADMIN, ROLE_USER]


def test_load_user_raises_when_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        load_user(db_session, 99999)
    assert exc_info.value.status_code == 401


def test_authenticate_with_valid_credentials(db_session):
    user = _add_user(db_session, "una", "correct horse")

    assert authenticate(db_session, "una@example.com", "correct horse").id == user.id


@pytest.mark.parametrize(
    "email,password",
    [
        ("una@example.com", "wrong"),
        ("nobody@example.com", "correct horse"),
    ],
)
def test_authenticate_rejects_bad_credentials(db_session, email, password):
    _add_user(db_session, "una", "correct horse")

    with pytest.raises(HTTPException) as exc_info:
        authenticate(db_session, email, password)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid credentials."


def test_password_hasher():
    hashed = _hasher.hash_password("pw")
    assert hashed != "pw"
    assert _hasher.verify_password("pw", hashed)
    assert not _hasher.verify_password("other", hashed)
    assert not _hasher.verify_password("pw", "not-a-bcrypt-hash")


def test_password_hasher_cost_bounds():
    with pytest.raises(ValueError):
        PasswordHasher(cost_factor=3)
    with pytest.raises(ValueError):
        PasswordHasher(cost_factor=21)
