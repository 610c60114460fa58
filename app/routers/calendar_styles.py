from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Calendar, CalendarStyle
from app.routers.common import apply_changes, get_or_404, page_items
from app.schemas.reference import CalendarStyleOut, CalendarStylePatch, CalendarStyleUpdate
from app.security.decorators import require_roles
from app.security.resources import ResourceType

logger = logging.getLogger(__name__)

# Shared by every user: reads need a login only, writes need an admin.
router = APIRouter(prefix="/api/v1/calendar_styles", tags=["calendar styles"])


@router.get("", response_model=list[CalendarStyleOut])
def list_calendar_styles(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[CalendarStyle]:
    stmt = select(CalendarStyle).order_by(CalendarStyle.id)
    return page_items(response, paginate(db, stmt, page))


@router.post("", response_model=CalendarStyleOut, status_code=status.HTTP_201_CREATED)
@require_roles(["ROLE_ADMIN"])
def create_calendar_style(payload: CalendarStyleUpdate, db: Session = Depends(get_db)) -> CalendarStyle:
    style = CalendarStyle(**payload.model_dump())
    db.add(style)
    db.commit()
    db.refresh(style)
    logger.info("Calendar style created id=%s", style.id)
    return style


@router.get("/{id}", response_model=CalendarStyleOut)
def get_calendar_style(id: int, db: Session = Depends(get_db)) -> CalendarStyle:
    return get_or_404(db, CalendarStyle, id, ResourceType.CALENDAR_STYLE)


@router.put("/{id}", response_model=CalendarStyleOut)
@require_roles(["ROLE_ADMIN"])
def replace_calendar_style(id: int, payload: CalendarStyleUpdate, db: Session = Depends(get_db)) -> CalendarStyle:
    return _update(db, id, payload, partial=False)


@router.patch("/{id}", response_model=CalendarStyleOut)
@require_roles(["ROLE_ADMIN"])
def update_calendar_style(id: int, payload: CalendarStylePatch, db: Session = Depends(get_db)) -> CalendarStyle:
    return _update(db, id, payload, partial=True)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
@require_roles(["ROLE_ADMIN"])
def delete_calendar_style(id: int, db: Session = Depends(get_db)) -> Response:
    style = get_or_404(db, CalendarStyle, id, ResourceType.CALENDAR_STYLE)
    # Calendars keep working without a style.
    db.execute(update(Calendar).where(Calendar.calendar_style_id == id).values(calendar_style_id=None))
    db.delete(style)
    db.commit()
    logger.info("Calendar style deleted id=%s", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, id: int, payload: BaseModel, partial: bool) -> CalendarStyle:
    style = get_or_404(db, CalendarStyle, id, ResourceType.CALENDAR_STYLE)
    apply_changes(style, payload, partial=partial)
    db.commit()
    db.refresh(style)
    return style
