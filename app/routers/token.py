from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.jwt_util import TokenValidator, issue_token
from app.schemas.security import TokenOut, TokenRequest
from app.security.auth import authenticate
from app.security.dependencies import get_token_validator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/token", tags=["token"])


@router.post("/get", response_model=TokenOut)
def get_token(
    payload: TokenRequest,
    db: Session = Depends(get_db),
    validator: TokenValidator = Depends(get_token_validator),
) -> TokenOut:
    # Public route (see config/security_config.yaml).
    user = authenticate(db, payload.email, payload.password)
    token = issue_token(user.id, validator.config, username=user.username, roles=user.effective_roles)
    logger.info("Token issued user_id=%s", user.id)
    return TokenOut(token=token)
