from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.pagination import PageRequest, page_request, paginate
from app.db.session import get_db
from app.models.calendar import Event
from app.routers.common import apply_changes, authorize, get_or_404, page_items, resolve_owner
from app.schemas.calendar import EventCreate, EventExtendedOut, EventOut, EventPatch, EventUpdate
from app.security.context import AccessContext
from app.security.dependencies import get_access
from app.security.resources import ResourceType

router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.get("", response_model=list[EventOut])
def list_events(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[Event]:
    # Narrowed to the principal's events by app/db/filters.py.
    stmt = select(Event).order_by(Event.id).execution_options(row_scope=ResourceType.EVENT)
    return page_items(response, paginate(db, stmt, page))


# Declared before /{id} so "extended" is not parsed as an id.
@router.get("/extended", response_model=list[EventExtendedOut])
def list_events_extended(
    response: Response,
    page: PageRequest = Depends(page_request),
    db: Session = Depends(get_db),
) -> list[Event]:
    stmt = select(Event).order_by(Event.id).execution_options(row_scope=ResourceType.EVENT)
    return page_items(response, paginate(db, stmt, page))


@router.get("/{id}/extended", response_model=EventExtendedOut)
def get_event_extended(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Event:
    event = get_or_404(db, Event, id, ResourceType.EVENT)
    authorize(access, ResourceType.EVENT, "GET", event)
    return event


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Event:
    owner = resolve_owner(db, access, payload.user_id)
    authorize(access, ResourceType.EVENT, "POST", owner)

    event = Event(user_id=owner.id, **payload.model_dump(exclude={"user_id"}))
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@router.get("/{id}", response_model=EventOut)
def get_event(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Event:
    event = get_or_404(db, Event, id, ResourceType.EVENT)
    authorize(access, ResourceType.EVENT, "GET", event)
    return event


@router.put("/{id}", response_model=EventOut)
def replace_event(
    id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Event:
    return _update(db, access, id, payload, "PUT")


@router.patch("/{id}", response_model=EventOut)
def update_event(
    id: int,
    payload: EventPatch,
    db: Session = Depends(get_db),
    access: AccessContext = Depends(get_access),
) -> Event:
    return _update(db, access, id, payload, "PATCH")


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(id: int, db: Session = Depends(get_db), access: AccessContext = Depends(get_access)) -> Response:
    event = get_or_404(db, Event, id, ResourceType.EVENT)
    authorize(access, ResourceType.EVENT, "DELETE", event)
    db.delete(event)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _update(db: Session, access: AccessContext, id: int, payload: BaseModel, method: str) -> Event:
    event = get_or_404(db, Event, id, ResourceType.EVENT)
    authorize(access, ResourceType.EVENT, method, event)
    apply_changes(event, payload, partial=method == "PATCH")
    db.commit()
    db.refresh(event)
    return event
