"""Serializable context produced after validating an access token."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenContext:
    """
    Claims of a validated token.

    Only ``user_id`` is trusted for authorization; roles are re-read from the
    database by the security layer.
    """

    user_id: str
    """User id from the ``sub`` claim."""

    username: str | None
    """Display name from the token; for logging/UI only."""

    roles: tuple[str, ...]
    """Roles at issue time."""

    expires_at: int | None = None
    """``exp`` claim as a unix timestamp."""

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "user_id": self.user_id,
            "username": self.username,
            "roles": list(self.roles),
            "expires_at": self.expires_at,
        }
