from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.calendar import CalendarOut, EventExtendedOut, ImageOut


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    firstname: str | None
    lastname: str | None
    # Always includes ROLE_USER.
    roles: list[str] = Field(validation_alias="effective_roles")
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    firstname: str | None = None
    lastname: str | None = None
    roles: list[str] = Field(default_factory=list)


class UserUpdate(BaseModel):
    """Full replacement (PUT). Roles cannot be changed through the API."""

    email: EmailStr
    username: str = Field(min_length=1, max_length=255)
    firstname: str | None = None
    lastname: str | None = None
    password: str | None = Field(default=None, min_length=1)


class UserPatch(BaseModel):
    email: EmailStr | None = None
    username: str | None = Field(default=None, min_length=1, max_length=255)
    firstname: str | None = None
    lastname: str | None = None
    password: str | None = Field(default=None, min_length=1)


class TokenRequest(BaseModel):
    email: str
    password: str


class TokenOut(BaseModel):
    token: str


class UserExtendedOut(UserOut):
    events: list[EventExtendedOut]
    images: list[ImageOut]
    calendars: list[CalendarOut]
