from __future__ import annotations

from typing import Any, TypeVar

from fastapi import HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db.pagination import Paginator
from app.models.security import User
from app.security.context import AccessContext
from app.security.resources import ResourceType, owner_of
from app.security.voters import attribute_for

M = TypeVar("M")

_VERBS = {
    "GET": "read",
    "POST": "added",
    "PUT": "modified",
    "PATCH": "modified",
    "DELETE": "deleted",
}


def _label(resource_type: ResourceType) -> str:
    return resource_type.value.replace("_", " ") + "s"


def get_or_404(db: Session, model: type[M], id: int, resource_type: ResourceType) -> M:
    # Plain lookup by id: item access is decided by the voter, not by row scoping.
    obj = db.get(model, id)
    if obj is None:
        name = resource_type.value.replace("_", " ").capitalize()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
    return obj


def authorize(access: AccessContext, resource_type: ResourceType, method: str, obj: Any) -> None:
    """Vote `<TYPE>_<METHOD>` with the owning user of `obj` as subject; 403 on denial."""

    access.deny_unless_granted(
        attribute_for(resource_type, method),
        owner_of(obj),
        f"Only own {_label(resource_type)} can be {_VERBS[method.upper()]}.",
    )


def resolve_owner(db: Session, access: AccessContext, user_id: int | None) -> User:
    """Owner for a new resource: the named user, or the current principal."""

    if user_id is None:
        if access.principal is None:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="user_id is required")
        user_id = access.principal.id

    owner = db.get(User, user_id)
    if owner is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Unknown user {user_id}")
    return owner


def apply_changes(obj: Any, changes: BaseModel, partial: bool) -> None:
    """
    Copy payload fields onto an ORM object.

    PATCH copies only the fields that were sent with a non-null value.
    """

    for field, value in changes.model_dump(exclude_unset=partial, exclude_none=partial).items():
        setattr(obj, field, value)


def page_items(response: Response, paginator: Paginator) -> list:
    response.headers.update(paginator.headers())
    return paginator.items
