from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import JSON, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.security import User


# Shared reference data: not owned by any user, readable by every user.


class CalendarStyle(TimestampMixin, Base):
    __tablename__ = "calendar_styles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)


class HolidayGroup(TimestampMixin, Base):
    __tablename__ = "holiday_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_short: Mapped[str] = mapped_column(String(10), nullable=False)

    holidays: Mapped[list["Holiday"]] = relationship(back_populates="holiday_group", order_by="Holiday.date")

    @property
    def holiday_ids(self) -> list[int]:
        return [holiday.id for holiday in self.holidays]


class Holiday(TimestampMixin, Base):
    __tablename__ = "holidays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    holiday_group_id: Mapped[int | None] = mapped_column(ForeignKey("holiday_groups.id"), nullable=True, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    holiday_group: Mapped[HolidayGroup | None] = relationship(back_populates="holidays")


class Calendar(TimestampMixin, Base):
    __tablename__ = "calendars"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Owner; set once at creation.
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subtitle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    calendar_style_id: Mapped[int | None] = mapped_column(ForeignKey("calendar_styles.id"), nullable=True)
    holiday_group_id: Mapped[int | None] = mapped_column(ForeignKey("holiday_groups.id"), nullable=True)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    user: Mapped[User] = relationship(back_populates="calendars")
    calendar_style: Mapped[CalendarStyle | None] = relationship()
    holiday_group: Mapped[HolidayGroup | None] = relationship()
    calendar_images: Mapped[list["CalendarImage"]] = relationship(
        back_populates="calendar",
        order_by="CalendarImage.id",
        cascade="all, delete-orphan",
    )


class Image(TimestampMixin, Base):
    __tablename__ = "images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    path: Mapped[str] = mapped_column(String(255), nullable=False)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    size: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user: Mapped[User] = relationship(back_populates="images")
    calendar_images: Mapped[list["CalendarImage"]] = relationship(
        back_populates="image",
        cascade="all, delete-orphan",
    )


class CalendarImage(TimestampMixin, Base):
    __tablename__ = "calendar_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    calendar_id: Mapped[int] = mapped_column(ForeignKey("calendars.id"), nullable=False, index=True)
    image_id: Mapped[int] = mapped_column(ForeignKey("images.id"), nullable=False, index=True)

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    # 0 is the title page, 1-12 the months.
    month: Mapped[int] = mapped_column(Integer, nullable=False)

    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[str | None] = mapped_column(String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    user: Mapped[User] = relationship(back_populates="calendar_images")
    calendar: Mapped[Calendar] = relationship(back_populates="calendar_images")
    image: Mapped[Image] = relationship(back_populates="calendar_images")


class Event(TimestampMixin, Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    user: Mapped[User] = relationship(back_populates="events")
