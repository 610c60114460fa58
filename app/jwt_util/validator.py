"""
Validate API-issued JWTs and extract claims.

Before we trust anything in a bearer token we check:

1. the **signature** (made with our own secret),
2. the **issuer** (``iss``) matches ``JWT_ISSUER``,
3. it hasn't **expired** (``exp``) and isn't used before ``nbf``,
4. a subject (``sub``) is present.

Only then is a ``TokenContext`` built for the rest of the app.
"""

from __future__ import annotations

import logging
from typing import Any

import jwt

from .config import JwtConfig
from .context import TokenContext

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when token validation fails. Do not log the token."""

    pass


def _extract_claims(payload: dict[str, Any]) -> TokenContext:
    """
    Build a ``TokenContext`` from a validated JWT payload.

    * **sub**: user id (string per RFC 7519; ints are tolerated).
    * **username**: display only.
    * **roles**: list of role names, or a single string.
    """

    user_id = payload.get("sub") or ""
    user_id = str(int(user_id)) if isinstance(user_id, (int, float)) else str(user_id)

    roles: list[str] = []
    raw_roles = payload.get("roles")
    if isinstance(raw_roles, list):
        roles = [str(r) for r in raw_roles]
    elif isinstance(raw_roles, str):
        roles = [raw_roles]

    username = payload.get("username")
    if username is not None:
        username = str(username)

    exp = payload.get("exp")
    expires_at = int(exp) if isinstance(exp, (int, float)) else None

    return TokenContext(
        user_id=user_id,
        username=username,
        roles=tuple(roles),
        expires_at=expires_at,
    )


class TokenValidator:
    """
    Validates access tokens issued by this API (see ``issuer.issue_token``).
    """

    def __init__(self, config: JwtConfig | None = None) -> None:
        self._config = config or JwtConfig.from_environ()

    @property
    def config(self) -> JwtConfig:
        return self._config

    def validate_and_extract(self, token: str) -> TokenContext:
        """
        Validate the access token and return a TokenContext.

        Raises ValidationError if signature, issuer or lifetime checks fail,
        or if the token carries no subject.
        """
        try:
            payload = jwt.decode(
                token,
                self._config.secret_key,
                algorithms=[self._config.algorithm],
                issuer=self._config.issuer,
                leeway=self._config.clock_skew_seconds,
                options={
                    "require": ["exp", "sub"],
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_iss": True,
                },
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Token expired")
            raise ValidationError("Token expired") from e
        except jwt.InvalidIssuerError as e:
            logger.info("Token invalid issuer")
            raise ValidationError("Invalid token: issuer") from e
        except jwt.InvalidTokenError as e:
            logger.info("Token invalid: %s", type(e).__name__)
            raise ValidationError("Invalid token") from e

        ctx = _extract_claims(payload)
        if not ctx.user_id:
            raise ValidationError("Invalid token: subject")
        return ctx


def validate_and_extract(token: str, config: JwtConfig | None = None) -> TokenContext:
    """
    Convenience function: validate bearer token and return TokenContext.

    Creates a ``TokenValidator`` (loading config from the environment if
    ``config`` is None) and delegates to its ``validate_and_extract`` method.
    """
    validator = TokenValidator(config=config)
    return validator.validate_and_extract(token)
