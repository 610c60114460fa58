from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.db.session import bind_access_context, get_db
from app.jwt_util import TokenValidator
from app.security.auth import extract_bearer_token, load_user, user_id_from_token
from app.security.config import SecurityConfig
from app.security.context import AccessContext
from app.security.errors import AccessPolicyUnavailableError
from app.security.principal import Principal

logger = logging.getLogger(__name__)


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise AccessPolicyUnavailableError("Security config not loaded. Did app startup run?")
    return config


def get_token_validator(request: Request) -> TokenValidator:
    validator = getattr(request.app.state, "token_validator", None)
    if validator is None:
        raise AccessPolicyUnavailableError("Token validator not configured. Did app startup run?")
    return validator


def get_access(request: Request) -> AccessContext:
    access = getattr(request.state, "access", None)
    if access is None:
        # enforce_security did not run for this request: refuse rather than serve unscoped data.
        raise AccessPolicyUnavailableError("Access context missing for request.")
    return access


def get_current_user(access: AccessContext = Depends(get_access)) -> Principal:
    if access.principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return access.principal


def enforce_security(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    validator: TokenValidator = Depends(get_token_validator),
    db: Session = Depends(get_db, use_cache=False),
) -> None:
    """
    Global security dependency.

    Resolves the principal, checks required roles and attaches the
    AccessContext used by row scoping and the voters. Route handlers stay
    free of auth code apart from their item-level `deny_unless_granted` calls.
    """

    path = request.url.path
    method = request.method.upper()

    rule = config.match(path, method)
    policy = config.access_policy

    # Optional decorator metadata (see app/security/decorators.py).
    endpoint = request.scope.get("endpoint")
    decorator_roles = set(getattr(endpoint, "__security_required_roles__", set())) if endpoint else set()

    required_roles = set(rule.required_roles) | decorator_roles

    # Public-access mode opens the API, but role checks still need a principal.
    auth_required = bool(required_roles) or (rule.auth_required and not policy.public_access)

    principal: Principal | None = None
    token = extract_bearer_token(request, config)
    if token is None:
        if auth_required:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
                headers={"WWW-Authenticate": "Bearer"},
            )
    elif auth_required or policy.public_access:
        user = load_user(db, user_id_from_token(token, validator))
        principal = Principal.from_user(user, config.role_hierarchy)

    access = AccessContext(
        principal=principal,
        row_filter=_app_state(request, "row_filter"),
        decision_manager=_app_state(request, "decision_manager"),
    )

    if required_roles and not access.is_granted(sorted(required_roles)):
        logger.info("Insufficient role path=%s method=%s principal=%s", path, method, principal.id if principal else None)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient role. Required one of: {sorted(required_roles)}",
        )

    request.state.access = access
    # FastAPI may hand this same session to the route handler.
    bind_access_context(db, request)


def _app_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise AccessPolicyUnavailableError(f"{name} not configured. Did app startup run?")
    return value
