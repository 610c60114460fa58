from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Calendar, Holiday, HolidayGroup
from app.routers.common import apply_changes, get_or_404, page_items
from app.schemas.reference import HolidayGroupOut, HolidayGroupPatch, HolidayGroupUpdate
from app.security.decorators import require_roles
from app.security.resources import ResourceType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/holiday_groups", tags=["holiday groups"])


@router.get("", response_model=list[HolidayGroupOut])
def list_holiday_groups(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[HolidayGroup]:
    stmt = select(HolidayGroup).order_by(HolidayGroup.id)
    return page_items(response, paginate(db, stmt, page))


@router.post("", response_model=HolidayGroupOut, status_code=status.HTTP_201_CREATED)
@require_roles(["ROLE_ADMIN"])
def create_holiday_group(payload: HolidayGroupUpdate, db: Session = Depends(get_db)) -> HolidayGroup:
    group = HolidayGroup(**payload.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Holiday group created id=%s", group.id)
    return group


@router.get("/{id}", response_model=HolidayGroupOut)
def get_holiday_group(id: int, db: Session = Depends(get_db)) -> HolidayGroup:
    return get_or_404(db, HolidayGroup, id, ResourceType.HOLIDAY_GROUP)


@router.put("/{id}", response_model=HolidayGroupOut)
@require_roles(["ROLE_ADMIN"])
def replace_holiday_group(id: int, payload: HolidayGroupUpdate, db: Session = Depends(get_db)) -> HolidayGroup:
    return _update(db, id, payload, partial=False)


@router.patch("/{id}", response_model=HolidayGroupOut)
@require_roles(["ROLE_ADMIN"])
def update_holiday_group(id: int, payload: HolidayGroupPatch, db: Session = Depends(get_db)) -> HolidayGroup:
    return _update(db, id, payload, partial=True)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
@require_roles(["ROLE_ADMIN"])
def delete_holiday_group(id: int, db: Session = Depends(get_db)) -> Response:
    group = get_or_404(db, HolidayGroup, id, ResourceType.HOLIDAY_GROUP)
    # Holidays and calendars outlive their group.
    db.execute(update(Holiday).where(Holiday.holiday_group_id == id).values(holiday_group_id=None))
    db.execute(update(Calendar).where(Calendar.holiday_group_id == id).values(holiday_group_id=None))
    db.delete(group)
    db.commit()
    logger.info("Holiday group deleted id=%s", id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, id: int, payload: BaseModel, partial: bool) -> HolidayGroup:
    group = get_or_404(db, HolidayGroup, id, ResourceType.HOLIDAY_GROUP)
    apply_changes(group, payload, partial=partial)
    db.commit()
    db.refresh(group)
    return group
