from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.security import User
from app.routers.common import authorize, get_or_404, page_items
from app.schemas.security import UserCreate, UserExtendedOut, UserOut, UserPatch, UserUpdate
from app.security.context import AccessContext
from app.security.decorators import require_roles
from app.security.dependencies import get_access, get_current_user
from app.security.passwords import hash_password
from app.security.principal import Principal
from app.security.resources import ResourceType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


# Declared before /{id} so "me" and "extended" are not parsed as ids.
@router.get("/me", response_model=UserOut)
def read_me(principal: Principal = Depends(get_current_user), db: Session = Depends(get_db)) -> User:
    return get_or_404(db, User, principal.id, ResourceType.USER)


@router.get("", response_model=list[UserOut])
def list_users(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[User]:
    stmt = select(User).order_by(User.id).execution_options(row_scope=ResourceType.USER)
    return page_items(response, paginate(db, stmt, page))


@router.get("/extended", response_model=list[UserExtendedOut])
def list_users_extended(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[User]:
    stmt = select(User).order_by(User.id).execution_options(row_scope=ResourceType.USER)
    return page_items(response, paginate(db, stmt, page))


@router.get("/{id}/extended", response_model=UserExtendedOut)
def get_user_extended(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> User:
    user = get_or_404(db, User, id, ResourceType.USER)
    authorize(access, ResourceType.USER, "GET", user)
    return user


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
@require_roles(["ROLE_ADMIN"])
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> User:
    _ensure_unique(db, payload.email, payload.username)

    user = User(
        email=payload.email,
        username=payload.username,
        password_hash=hash_password(payload.password),
        firstname=payload.firstname,
        lastname=payload.lastname,
        roles=payload.roles,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created id=%s", user.id)
    return user


@router.get("/{id}", response_model=UserOut)
def get_user(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> User:
    user = get_or_404(db, User, id, ResourceType.USER)
    authorize(access, ResourceType.USER, "GET", user)
    return user


@router.put("/{id}", response_model=UserOut)
def replace_user(
    id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> User:
    return _update(db, access, id, payload, "PUT")


@router.patch("/{id}", response_model=UserOut)
def update_user(
    id: int,
    payload: UserPatch,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> User:
    return _update(db, access, id, payload, "PATCH")


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Response:
    user = get_or_404(db, User, id, ResourceType.USER)
    authorize(access, ResourceType.USER, "DELETE", user)
    db.delete(user)
    db.commit()
    logger.info("User deleted id=%s", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, access: AccessContext, id: int, payload: BaseModel, method: str) -> User:
    user = get_or_404(db, User, id, ResourceType.USER)
    authorize(access, ResourceType.USER, method, user)

    partial = method == "PATCH"
    changes = payload.model_dump(exclude_unset=partial, exclude_none=partial)
    password = changes.pop("password", None)

    _ensure_unique(db, changes.get("email"), changes.get("username"), exclude_id=user.id)

    for field, value in changes.items():
        setattr(user, field, value)
    if password:
        user.password_hash = hash_password(password)

    db.commit()
    db.refresh(user)
    return user


def _ensure_unique(db: Session, email: str | None, username: str | None, exclude_id: int | None = None) -> None:
    conditions = []
    if email is not None:
        conditions.append(User.email == email)
    if username is not None:
        conditions.append(User.username == username)
    if not conditions:
        return

    stmt = select(User.id).where(or_(*conditions))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)

    if db.execute(stmt.limit(1)).first() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email or username already in use")
