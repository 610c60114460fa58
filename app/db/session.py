from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.settings import get_settings


_settings = get_settings()

engine = create_engine(
    _settings.resolved_db_url(),
    connect_args={"check_same_thread": False} if _settings.resolved_db_url().startswith("sqlite") else {},
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=Session)


def bind_access_context(db: Session, request: Request) -> None:
    """
    Copy the request's AccessContext (if any) into `Session.info["access"]`.

    The row-scoping hook (app/db/filters.py) reads it from there, so a
    collection query tagged with `row_scope` is narrowed to the principal's rows.
    """

    access = getattr(getattr(request, "state", None), "access", None)
    if access is not None:
        db.info["access"] = access
    else:
        db.info.pop("access", None)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Main DB dependency.

    The security dependency asks for its own session (use_cache=False) before
    the principal is known; route handlers get a session that carries the
    request's AccessContext.
    """

    db = SessionLocal()
    try:
        bind_access_context(db, request)
        yield db
    finally:
        db.close()
