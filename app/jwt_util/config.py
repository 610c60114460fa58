"""Configuration from environment variables. No hardcoded secrets."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _getenv(key: str, default: str | None = None) -> str | None:
    return os.environ.get(key, default)


def _getenv_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class JwtConfig:
    """
    JWT issuing / validation configuration from environment.

    Required:
        JWT_SECRET_KEY: Shared secret used to sign and verify tokens (HMAC).

    Optional:
        JWT_ALGORITHM: Signing algorithm (default HS256).
        JWT_ISSUER: Value of the ``iss`` claim (default calendar-api).
        JWT_TTL_SECONDS: Token lifetime (default 3600).
        CLOCK_SKEW_SECONDS: Seconds of tolerance for exp/nbf (default 120).
    """

    secret_key: str
    algorithm: str
    issuer: str
    ttl_seconds: int
    clock_skew_seconds: int

    @classmethod
    def from_environ(cls) -> JwtConfig:
        secret = _strip_or_none(_getenv("JWT_SECRET_KEY"))
        if not secret:
            raise _config_error("JWT_SECRET_KEY must be set")
        return cls(
            secret_key=secret,
            algorithm=_strip_or_none(_getenv("JWT_ALGORITHM")) or "HS256",
            issuer=_strip_or_none(_getenv("JWT_ISSUER")) or "calendar-api",
            ttl_seconds=_getenv_int("JWT_TTL_SECONDS", 3600),
            clock_skew_seconds=_getenv_int("CLOCK_SKEW_SECONDS", 120),
        )


def _strip_or_none(s: str | None) -> str | None:
    if s is None:
        return None
    t = s.strip()
    return t if t else None


def _config_error(msg: str) -> Exception:
    return ValueError(msg)
