"""
Standalone utility to issue and validate the API's JWT access tokens.

This package has no dependency on other app packages (app.db, app.security, etc.).
Use issue_token() after a successful login and validate_and_extract() with a
bearer token string to get a TokenContext.
"""

from .config import JwtConfig
from .context import TokenContext
from .issuer import issue_token
from .validator import TokenValidator, ValidationError, validate_and_extract

__all__ = [
    "JwtConfig",
    "TokenContext",
    "TokenValidator",
    "ValidationError",
    "issue_token",
    "validate_and_extract",
]
