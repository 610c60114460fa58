from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Calendar, CalendarImage, Image
from app.routers.common import apply_changes, authorize, get_or_404, page_items, resolve_owner
from app.schemas.calendar import CalendarImageCreate, CalendarImageOut, CalendarImagePatch, CalendarImageUpdate
from app.security.context import AccessContext
from app.security.dependencies import get_access
from app.security.resources import ResourceType

router = APIRouter(prefix="/api/v1/calendar_images", tags=["calendar_images"])


@router.get("", response_model=list[CalendarImageOut])
def list_calendar_images(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[CalendarImage]:
    stmt = (
        select(CalendarImage)
        .order_by(CalendarImage.id)
        .execution_options(row_scope=ResourceType.CALENDAR_IMAGE)
    )
    return page_items(response, paginate(db, stmt, page))


@router.post("", response_model=CalendarImageOut, status_code=status.HTTP_201_CREATED)
def create_calendar_image(
    payload: CalendarImageCreate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> CalendarImage:
    owner = resolve_owner(db, access, payload.user_id)
    authorize(access, ResourceType.CALENDAR_IMAGE, "POST", owner)
    _check_links(db, owner.id, payload.calendar_id, payload.image_id)

    calendar_image = CalendarImage(user_id=owner.id, **payload.model_dump(exclude={"user_id"}))
    db.add(calendar_image)
    db.commit()
    db.refresh(calendar_image)
    return calendar_image


@router.get("/{id}", response_model=CalendarImageOut)
def get_calendar_image(
    id: int,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> CalendarImage:
    calendar_image = get_or_404(db, CalendarImage, id, ResourceType.CALENDAR_IMAGE)
    authorize(access, ResourceType.CALENDAR_IMAGE, "GET", calendar_image)
    return calendar_image


@router.put("/{id}", response_model=CalendarImageOut)
def replace_calendar_image(
    id: int,
    payload: CalendarImageUpdate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> CalendarImage:
    return _update(db, access, id, payload, "PUT")


@router.patch("/{id}", response_model=CalendarImageOut)
def update_calendar_image(
    id: int,
    payload: CalendarImagePatch,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> CalendarImage:
    return _update(db, access, id, payload, "PATCH")


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_calendar_image(
    id: int,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Response:
    calendar_image = get_or_404(db, CalendarImage, id, ResourceType.CALENDAR_IMAGE)
    authorize(access, ResourceType.CALENDAR_IMAGE, "DELETE", calendar_image)
    db.delete(calendar_image)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, access: AccessContext, id: int, payload: BaseModel, method: str) -> CalendarImage:
    calendar_image = get_or_404(db, CalendarImage, id, ResourceType.CALENDAR_IMAGE)
    authorize(access, ResourceType.CALENDAR_IMAGE, method, calendar_image)

    calendar_id = getattr(payload, "calendar_id", None) or calendar_image.calendar_id
    image_id = getattr(payload, "image_id", None) or calendar_image.image_id
    _check_links(db, calendar_image.user_id, calendar_id, image_id)

    apply_changes(calendar_image, payload, partial=method == "PATCH")
    db.commit()
    db.refresh(calendar_image)
    return calendar_image


def _check_links(db: Session, owner_id: int, calendar_id: int, image_id: int) -> None:
    """A calendar image may only join a calendar and an image of its own owner."""

    calendar = db.get(Calendar, calendar_id)
    if calendar is None or calendar.user_id != owner_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Calendar {calendar_id} not found for user {owner_id}",
        )

    image = db.get(Image, image_id)
    if image is None or image.user_id != owner_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Image {image_id} not found for user {owner_id}",
        )
