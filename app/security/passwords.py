"""Bcrypt password hashing."""

from __future__ import annotations

import bcrypt


class PasswordHasher:
    """
    Hash and verify user passwords with bcrypt.

    The default cost factor 12 takes roughly 250ms per hash; tests pass a
    lower one (minimum 4) to stay fast.
    """

    def __init__(self, cost_factor: int = 12) -> None:
        if not 4 <= cost_factor <= 20:
            raise ValueError("Cost factor must be between 4 and 20")
        self._cost_factor = cost_factor

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Constant-time check; an unparsable hash counts as a mismatch."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, AttributeError):
            return False


_default_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _default_hasher.hash_password(password)


def verify_password(password: str, password_hash: str) -> bool:
    return _default_hasher.verify_password(password, password_hash)
