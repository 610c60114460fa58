from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Calendar, CalendarStyle, HolidayGroup
from app.routers.common import apply_changes, authorize, get_or_404, page_items, resolve_owner
from app.schemas.calendar import CalendarCreate, CalendarExtendedOut, CalendarOut, CalendarPatch, CalendarUpdate
from app.security.context import AccessContext
from app.security.dependencies import get_access
from app.security.resources import ResourceType

router = APIRouter(prefix="/api/v1/calendars", tags=["calendars"])


@router.get("", response_model=list[CalendarOut])
def list_calendars(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[Calendar]:
    stmt = select(Calendar).order_by(Calendar.id).execution_options(row_scope=ResourceType.CALENDAR)
    return page_items(response, paginate(db, stmt, page))


# Declared before /{id} so "extended" is not parsed as an id.
@router.get("/extended", response_model=list[CalendarExtendedOut])
def list_calendars_extended(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[Calendar]:
    stmt = select(Calendar).order_by(Calendar.id).execution_options(row_scope=ResourceType.CALENDAR)
    return page_items(response, paginate(db, stmt, page))


@router.get("/{id}/extended", response_model=CalendarExtendedOut)
def get_calendar_extended(
    id: int,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Calendar:
    calendar = get_or_404(db, Calendar, id, ResourceType.CALENDAR)
    authorize(access, ResourceType.CALENDAR, "GET", calendar)
    return calendar


@router.post("", response_model=CalendarOut, status_code=status.HTTP_201_CREATED)
def create_calendar(
    payload: CalendarCreate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Calendar:
    owner = resolve_owner(db, access, payload.user_id)
    authorize(access, ResourceType.CALENDAR, "POST", owner)
    _check_links(db, payload)

    calendar = Calendar(user_id=owner.id, **payload.model_dump(exclude={"user_id"}))
    db.add(calendar)
    db.commit()
    db.refresh(calendar)
    return calendar


@router.get("/{id}", response_model=CalendarOut)
def get_calendar(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Calendar:
    calendar = get_or_404(db, Calendar, id, ResourceType.CALENDAR)
    authorize(access, ResourceType.CALENDAR, "GET", calendar)
    return calendar


@router.put("/{id}", response_model=CalendarOut)
def replace_calendar(
    id: int,
    payload: CalendarUpdate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Calendar:
    return _update(db, access, id, payload, "PUT")


@router.patch("/{id}", response_model=CalendarOut)
def update_calendar(
    id: int,
    payload: CalendarPatch,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Calendar:
    return _update(db, access, id, payload, "PATCH")


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_calendar(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Response:
    calendar = get_or_404(db, Calendar, id, ResourceType.CALENDAR)
    authorize(access, ResourceType.CALENDAR, "DELETE", calendar)
    db.delete(calendar)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, access: AccessContext, id: int, payload: BaseModel, method: str) -> Calendar:
    calendar = get_or_404(db, Calendar, id, ResourceType.CALENDAR)
    authorize(access, ResourceType.CALENDAR, method, calendar)
    _check_links(db, payload)
    apply_changes(calendar, payload, partial=method == "PATCH")
    db.commit()
    db.refresh(calendar)
    return calendar


def _check_links(db: Session, payload: CalendarUpdate | CalendarPatch) -> None:
    """Style and holiday group are optional, but must exist when given."""

    style_id = payload.calendar_style_id
    if style_id is not None and db.get(CalendarStyle, style_id) is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Unknown calendar style {style_id}")

    group_id = payload.holiday_group_id
    if group_id is not None and db.get(HolidayGroup, group_id) is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Unknown holiday group {group_id}")
