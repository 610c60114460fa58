from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Shared by all users: no user_id anywhere.


class CalendarStyleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    config: dict[str, Any]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class CalendarStyleUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    config: dict[str, Any] = Field(default_factory=dict)


class CalendarStylePatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    config: dict[str, Any] | None = None


class HolidayGroupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_short: str
    holiday_ids: list[int]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class HolidayGroupUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    name_short: str = Field(min_length=1, max_length=10)


class HolidayGroupPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    name_short: str | None = Field(default=None, min_length=1, max_length=10)


class HolidayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    holiday_group_id: int | None
    name: str
    date: datetime.date
    config: dict[str, Any]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class HolidayUpdate(BaseModel):
    holiday_group_id: int | None = None
    name: str = Field(min_length=1, max_length=255)
    date: datetime.date
    config: dict[str, Any] = Field(default_factory=dict)


class HolidayPatch(BaseModel):
    holiday_group_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    date: datetime.date | None = None
    config: dict[str, Any] | None = None
