from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.calendar import Calendar, CalendarImage, Event, Image


ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"
ROLE_SUPER_ADMIN = "ROLE_SUPER_ADMIN"


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username"),
        UniqueConstraint("email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    firstname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lastname: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Stored roles only; ROLE_USER is implied (see effective_roles).
    roles: Mapped[list[Any]] = mapped_column(JSON, default=list, nullable=False)

    calendars: Mapped[list["Calendar"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="Calendar.id"
    )
    calendar_images: Mapped[list["CalendarImage"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    events: Mapped[list["Event"]] = relationship(back_populates="user", cascade="all, delete-orphan", order_by="Event.id")
    images: Mapped[list["Image"]] = relationship(back_populates="user", cascade="all, delete-orphan", order_by="Image.id")

    @property
    def effective_roles(self) -> list[str]:
        """Stored roles plus ROLE_USER, which every user has."""
        roles = [str(r) for r in (self.roles or [])]
        if ROLE_USER not in roles:
            roles.append(ROLE_USER)
        return roles


# User's relationships name these classes; register them with the mapper too.
from app.models import calendar as _calendar  # noqa: E402,F401
