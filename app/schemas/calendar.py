from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.reference import CalendarStyleOut, HolidayGroupOut

# Create payloads may carry user_id, but the voter only accepts the caller's
# own id (any id in public-access mode). Update payloads never carry user_id:
# ownership is fixed at creation.


class CalendarOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    title: str | None
    subtitle: str | None
    calendar_style_id: int | None
    holiday_group_id: int | None
    config: dict[str, Any]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class CalendarUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    title: str | None = None
    subtitle: str | None = None
    calendar_style_id: int | None = None
    holiday_group_id: int | None = None
    config: dict[str, Any] = Field(default_factory=dict)


class CalendarCreate(CalendarUpdate):
    user_id: int | None = None


class CalendarPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    title: str | None = None
    subtitle: str | None = None
    calendar_style_id: int | None = None
    holiday_group_id: int | None = None
    config: dict[str, Any] | None = None


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    path: str
    width: int | None
    height: int | None
    size: int | None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ImageUpdate(BaseModel):
    path: str = Field(min_length=1, max_length=255)
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    size: int | None = Field(default=None, ge=0)


class ImageCreate(ImageUpdate):
    user_id: int | None = None


class ImagePatch(BaseModel):
    path: str | None = Field(default=None, min_length=1, max_length=255)
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    size: int | None = Field(default=None, ge=0)


class CalendarImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    calendar_id: int
    image_id: int
    year: int
    month: int
    title: str | None
    position: str | None
    url: str | None
    config: dict[str, Any]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class CalendarImageUpdate(BaseModel):
    calendar_id: int
    image_id: int
    year: int = Field(ge=1970, le=2100)
    month: int = Field(ge=0, le=12)
    title: str | None = None
    position: str | None = None
    url: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)


class CalendarImageCreate(CalendarImageUpdate):
    user_id: int | None = None


class CalendarImagePatch(BaseModel):
    calendar_id: int | None = None
    image_id: int | None = None
    year: int | None = Field(default=None, ge=1970, le=2100)
    month: int | None = Field(default=None, ge=0, le=12)
    title: str | None = None
    position: str | None = None
    url: str | None = None
    config: dict[str, Any] | None = None


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    type: int
    date: datetime.date
    config: dict[str, Any]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class EventUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: int = Field(default=0, ge=0)
    date: datetime.date
    config: dict[str, Any] = Field(default_factory=dict)


class EventCreate(EventUpdate):
    user_id: int | None = None


class EventPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: int | None = Field(default=None, ge=0)
    date: datetime.date | None = None
    config: dict[str, Any] | None = None


# Extended read views: the row plus its related rows in one response.


class EventExtendedOut(BaseModel):
    """Event as nested in other views; the owner is implied by the parent."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: int
    date: datetime.date
    config: dict[str, Any]


class CalendarExtendedOut(CalendarOut):
    calendar_style: CalendarStyleOut | None
    holiday_group: HolidayGroupOut | None
    calendar_images: list[CalendarImageOut]
