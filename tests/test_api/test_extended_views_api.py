"""Extended read views: same access rules as the plain views, with related rows nested."""

from __future__ import annotations

import pytest


def test_calendar_extended_nests_style_group_and_images(client, login):
    resp = client.get("/api/v1/calendars/1/extended", headers=login("user1"))

    assert resp.status_code == 200
    body = resp.json()
    assert body["calendar_style"]["name"] == "Classic"
    assert body["holiday_group"]["holiday_ids"] == [1, 2, 3]
    assert [ci["title"] for ci in body["calendar_images"]] == ["Family", "Beach"]


def test_calendar_extended_without_links(client, login):
    body = client.get("/api/v1/calendars/2/extended", headers=login("user2")).json()

    assert body["calendar_style"] is None
    assert body["holiday_group"] is None
    assert len(body["calendar_images"]) == 1


def test_extended_collection_is_scoped(client, login):
    user1 = client.get("/api/v1/calendars/extended", headers=login("user1"))
    admin = client.get("/api/v1/calendars/extended", headers=login("admin"))

    assert user1.status_code == 200
    assert user1.headers["X-Total-Count"] == "1"
    assert [c["id"] for c in user1.json()] == [1]
    assert admin.headers["X-Total-Count"] == "2"


@pytest.mark.parametrize(
    "path,detail",
    [
        ("/api/v1/calendars/2/extended", "Only own calendars can be read."),
        ("/api/v1/events/3/extended", "Only own events can be read."),
        ("/api/v1/users/2/extended", "Only own users can be read."),
    ],
)
def test_foreign_extended_items_are_403(client, login, path, detail):
    resp = client.get(path, headers=login("user1"))
    assert resp.status_code == 403
    assert resp.json()["detail"] == detail


def test_event_extended_omits_owner(client, login):
    resp = client.get("/api/v1/events/extended", headers=login("user1"))

    assert [e["name"] for e in resp.json()] == ["Birthday Una", "Wedding day"]
    assert all("user_id" not in e for e in resp.json())


def test_missing_extended_item_is_404(client, login):
    resp = client.get("/api/v1/events/999/extended", headers=login("user1"))
    assert resp.status_code == 404


def test_user_extended_nests_owned_rows(client, login):
    body = client.get("/api/v1/users/1/extended", headers=login("user1")).json()

    assert [e["name"] for e in body["events"]] == ["Birthday Una", "Wedding day"]
    assert [c["name"] for c in body["calendars"]] == ["Family 2024"]
    assert [i["path"] for i in body["images"]] == ["images/user1/beach.jpg"]
    assert "password_hash" not in body


def test_user_extended_collection_is_scoped(client, login):
    user2 = client.get("/api/v1/users/extended", headers=login("user2"))
    admin = client.get("/api/v1/users/extended", headers=login("admin"))

    assert [u["id"] for u in user2.json()] == [2]
    assert len(admin.json()) == 3


def test_calendar_links_to_style_and_group(client, login):
    payload = {"name": "Work 2025", "calendar_style_id": 2, "holiday_group_id": 1}
    resp = client.post("/api/v1/calendars", json=payload, headers=login("user2"))

    assert resp.status_code == 201
    assert resp.json()["calendar_style_id"] == 2
    assert resp.json()["holiday_group_id"] == 1


@pytest.mark.parametrize("field", ["calendar_style_id", "holiday_group_id"])
def test_calendar_link_to_unknown_row_is_422(client, login, field):
    resp = client.patch("/api/v1/calendars/1", json={field: 999}, headers=login("user1"))
    assert resp.status_code == 422
