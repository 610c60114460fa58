"""
Tests for collection pagination: page math, range headers and the count query.

Uses db_session fixture: in-memory SQLite, rolled back after each test.
"""
from __future__ import annotations

from sqlalchemy import select

from app.db.pagination import PageRequest, Paginator, paginate
from app.models.calendar import Calendar
from app.models.security import User


def test_headers_first_page():
    p = Paginator(items=list(range(10)), total_items=42, current_page=1, items_per_page=10)
    assert p.last_page == 5
    assert p.headers() == {
        "Accept-Ranges": "items",
        "Range-Unit": "items",
        "Content-Range": "0-10/42",
        "X-Total-Count": "42",
    }


def test_headers_last_page_ends_at_total():
    p = Paginator(items=[1, 2], total_items=42, current_page=5, items_per_page=10)
    assert p.headers()["Content-Range"] == "40-42/42"


def test_headers_empty_collection():
    p = Paginator(items=[], total_items=0, current_page=1, items_per_page=30)
    assert p.last_page == 1
    assert p.headers()["Content-Range"] == "0-0/0"
    assert p.headers()["X-Total-Count"] == "0"


def test_headers_page_past_the_end():
    p = Paginator(items=[], total_items=5, current_page=3, items_per_page=10)
    assert p.headers()["Content-Range"] == "0-5/5"


def test_page_request_offset():
    assert PageRequest().offset == 0
    assert PageRequest(page=3, items_per_page=25).offset == 50


def test_paginate_counts_all_and_returns_one_page(db_session):
    owner = User(email="o@example.com", username="o", password_hash="x", roles=[])
    db_session.add(owner)
    db_session.flush()
    db_session.add_all([Calendar(user_id=owner.id, name=f"cal {i}", config={}) for i in range(7)])
    db_session.flush()

    stmt = select(Calendar).order_by(Calendar.id)
    paginator = paginate(db_session, stmt, PageRequest(page=2, items_per_page=3))

    assert paginator.total_items == 7
    assert [c.name for c in paginator.items] == ["cal 3", "cal 4", "cal 5"]
    assert paginator.headers()["Content-Range"] == "3-6/7"
