"""Issue signed access tokens."""

from __future__ import annotations

import time
from collections.abc import Iterable

import jwt

from .config import JwtConfig


def issue_token(
    user_id: int | str,
    config: JwtConfig,
    username: str | None = None,
    roles: Iterable[str] = (),
    now: int | None = None,
) -> str:
    """
    Return a signed JWT for ``user_id``.

    ``iat`` and ``nbf`` are set to ``now`` (default: current time), ``exp`` to
    ``now + config.ttl_seconds``.
    """

    issued_at = int(time.time()) if now is None else now
    payload: dict[str, object] = {
        "sub": str(user_id),
        "iss": config.issuer,
        "iat": issued_at,
        "nbf": issued_at,
        "exp": issued_at + config.ttl_seconds,
        "roles": list(roles),
    }
    if username is not None:
        payload["username"] = username

    return jwt.encode(payload, config.secret_key, algorithm=config.algorithm)
