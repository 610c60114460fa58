from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models.calendar import Calendar, CalendarImage, CalendarStyle, Event, Holiday, HolidayGroup, Image
from app.models.security import ROLE_ADMIN, User
from app.security.passwords import hash_password


def init_db(seed: bool = True) -> None:
    """
    Create tables and (optionally) seed demo data.

    Also seeds two calendar styles and one holiday group with three holidays;
    the first calendar of user1 uses both.

    Demo logins (password = username):
      user1@example.com  ROLE_USER   (id 1)
      user2@example.com  ROLE_USER   (id 2)
      admin@example.com  ROLE_ADMIN  (id 3)
    """

    Base.metadata.create_all(bind=engine)

    if not seed:
        return

    with SessionLocal() as db:
        if _has_seed_data(db):
            return
        seed_demo_data(db)


def _has_seed_data(db: Session) -> bool:
    return db.execute(select(User.id).limit(1)).first() is not None


def seed_demo_data(db: Session) -> None:
    # Users
    admin = User(
        email="admin@example.com",
        username="admin",
        password_hash=hash_password("admin"),
        firstname="Ada",
        lastname="Admin",
        roles=[ROLE_ADMIN],
    )
    user1 = User(
        email="user1@example.com",
        username="user1",
        password_hash=hash_password("user1"),
        firstname="Una",
        lastname="One",
        roles=[],
    )
    user2 = User(
        email="user2@example.com",
        username="user2",
        password_hash=hash_password("user2"),
        firstname="Theo",
        lastname="Two",
        roles=[],
    )
    db.add_all([user1, user2, admin])
    db.flush()

    # Shared reference data
    classic = CalendarStyle(name="Classic", config={"font": "serif"})
    modern = CalendarStyle(name="Modern", config={"font": "sans-serif"})
    saxony = HolidayGroup(name="Germany, Saxony", name_short="DE-SN")
    db.add_all([classic, modern, saxony])
    db.flush()

    db.add_all(
        [
            Holiday(holiday_group_id=saxony.id, name="New Year", date=date(2024, 1, 1), config={}),
            Holiday(holiday_group_id=saxony.id, name="Reformation Day", date=date(2024, 10, 31), config={}),
            Holiday(holiday_group_id=saxony.id, name="Christmas Day", date=date(2024, 12, 25), config={}),
        ]
    )

    # Calendars and images
    cal1 = Calendar(
        user_id=user1.id,
        name="Family 2024",
        title="Family",
        subtitle="2024",
        calendar_style_id=classic.id,
        holiday_group_id=saxony.id,
        config={"background": "#ffffff"},
    )
    cal2 = Calendar(user_id=user2.id, name="Travel 2024", title="Travel", subtitle=None, config={})
    db.add_all([cal1, cal2])

    img1 = Image(user_id=user1.id, path="images/user1/beach.jpg", width=6000, height=4000, size=8_421_337)
    img2 = Image(user_id=user2.id, path="images/user2/alps.jpg", width=5472, height=3648, size=7_002_112)
    db.add_all([img1, img2])
    db.flush()

    db.add_all(
        [
            CalendarImage(user_id=user1.id, calendar_id=cal1.id, image_id=img1.id, year=2024, month=0, title="Family"),
            CalendarImage(user_id=user1.id, calendar_id=cal1.id, image_id=img1.id, year=2024, month=1, title="Beach"),
            CalendarImage(user_id=user2.id, calendar_id=cal2.id, image_id=img2.id, year=2024, month=1, title="Alps"),
        ]
    )

    # Events
    db.add_all(
        [
            Event(user_id=user1.id, name="Birthday Una", type=0, date=date(1990, 3, 14), config={"color": "red"}),
            Event(user_id=user1.id, name="Wedding day", type=1, date=date(2015, 6, 20), config={}),
            Event(user_id=user2.id, name="Birthday Theo", type=0, date=date(1988, 11, 2), config={}),
        ]
    )

    db.commit()
