from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Holiday, HolidayGroup
from app.routers.common import apply_changes, get_or_404, page_items
from app.schemas.reference import HolidayOut, HolidayPatch, HolidayUpdate
from app.security.decorators import require_roles
from app.security.resources import ResourceType

router = APIRouter(prefix="/api/v1/holidays", tags=["holidays"])


@router.get("", response_model=list[HolidayOut])
def list_holidays(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[Holiday]:
    stmt = select(Holiday).order_by(Holiday.date, Holiday.id)
    return page_items(response, paginate(db, stmt, page))


@router.post("", response_model=HolidayOut, status_code=status.HTTP_201_CREATED)
@require_roles(["ROLE_ADMIN"])
def create_holiday(payload: HolidayUpdate, db: Session = Depends(get_db)) -> Holiday:
    _check_group(db, payload.holiday_group_id)

    holiday = Holiday(**payload.model_dump())
    db.add(holiday)
    db.commit()
    db.refresh(holiday)
    return holiday


@router.get("/{id}", response_model=HolidayOut)
def get_holiday(id: int, db: Session = Depends(get_db)) -> Holiday:
    return get_or_404(db, Holiday, id, ResourceType.HOLIDAY)


@router.put("/{id}", response_model=HolidayOut)
@require_roles(["ROLE_ADMIN"])
def replace_holiday(id: int, payload: HolidayUpdate, db: Session = Depends(get_db)) -> Holiday:
    return _update(db, id, payload, partial=False)


@router.patch("/{id}", response_model=HolidayOut)
@require_roles(["ROLE_ADMIN"])
def update_holiday(id: int, payload: HolidayPatch, db: Session = Depends(get_db)) -> Holiday:
    return _update(db, id, payload, partial=True)


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
@require_roles(["ROLE_ADMIN"])
def delete_holiday(id: int, db: Session = Depends(get_db)) -> Response:
    holiday = get_or_404(db, Holiday, id, ResourceType.HOLIDAY)
    db.delete(holiday)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, id: int, payload: HolidayUpdate | HolidayPatch, partial: bool) -> Holiday:
    holiday = get_or_404(db, Holiday, id, ResourceType.HOLIDAY)
    _check_group(db, payload.holiday_group_id)
    apply_changes(holiday, payload, partial=partial)
    db.commit()
    db.refresh(holiday)
    return holiday


def _check_group(db: Session, holiday_group_id: int | None) -> None:
    if holiday_group_id is not None and db.get(HolidayGroup, holiday_group_id) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown holiday group {holiday_group_id}",
        )
