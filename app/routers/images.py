from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Image
from app.routers.common import apply_changes, authorize, get_or_404, page_items, resolve_owner
from app.schemas.calendar import ImageCreate, ImageOut, ImagePatch, ImageUpdate
from app.security.context import AccessContext
from app.security.dependencies import get_access
from app.security.resources import ResourceType

router = APIRouter(prefix="/api/v1/images", tags=["images"])


@router.get("", response_model=list[ImageOut])
def list_images(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[Image]:
    stmt = select(Image).order_by(Image.id).execution_options(row_scope=ResourceType.IMAGE)
    return page_items(response, paginate(db, stmt, page))


@router.post("", response_model=ImageOut, status_code=status.HTTP_201_CREATED)
def create_image(
    payload: ImageCreate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Image:
    owner = resolve_owner(db, access, payload.user_id)
    authorize(access, ResourceType.IMAGE, "POST", owner)

    image = Image(user_id=owner.id, **payload.model_dump(exclude={"user_id"}))
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


@router.get("/{id}", response_model=ImageOut)
def get_image(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Image:
    image = get_or_404(db, Image, id, ResourceType.IMAGE)
    authorize(access, ResourceType.IMAGE, "GET", image)
    return image


@router.put("/{id}", response_model=ImageOut)
def replace_image(
    id: int,
    payload: ImageUpdate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Image:
    return _update(db, access, id, payload, "PUT")


@router.patch("/{id}", response_model=ImageOut)
def update_image(
    id: int,
    payload: ImagePatch,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Image:
    return _update(db, access, id, payload, "PATCH")


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Response:
    image = get_or_404(db, Image, id, ResourceType.IMAGE)
    authorize(access, ResourceType.IMAGE, "DELETE", image)
    db.delete(image)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, access: AccessContext, id: int, payload: BaseModel, method: str) -> Image:
    image = get_or_404(db, Image, id, ResourceType.IMAGE)
    authorize(access, ResourceType.IMAGE, method, image)
    apply_changes(image, payload, partial=method == "PATCH")
    db.commit()
    db.refresh(image)
    return image
