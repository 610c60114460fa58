"""Event endpoints: row-scoped collections and owner voting on items."""

from __future__ import annotations

import pytest

NEW_EVENT = {"name": "Dentist", "type": 2, "date": "2024-05-01", "config": {"color": "blue"}}


def test_user_sees_only_own_events(client, login):
    resp = client.get("/api/v1/events", headers=login("user1"))

    assert resp.status_code == 200
    assert [e["name"] for e in resp.json()] == ["Birthday Una", "Wedding day"]
    assert {e["user_id"] for e in resp.json()} == {1}
    assert resp.headers["X-Total-Count"] == "2"
    assert resp.headers["Content-Range"] == "0-2/2"
    assert resp.headers["Accept-Ranges"] == "items"


def test_admin_sees_all_events(client, login):
    resp = client.get("/api/v1/events", headers=login("admin"))

    assert resp.status_code == 200
    assert len(resp.json()) == 3
    assert resp.headers["X-Total-Count"] == "3"


def test_pagination_params(client, login):
    resp = client.get("/api/v1/events", params={"page": 2, "itemsPerPage": 1}, headers=login("user1"))

    assert [e["name"] for e in resp.json()] == ["Wedding day"]
    assert resp.headers["X-Total-Count"] == "2"
    assert resp.headers["Content-Range"] == "1-2/2"


@pytest.mark.parametrize("params", [{"itemsPerPage": 0}, {"itemsPerPage": 101}, {"page": 0}])
def test_pagination_bounds(client, login, params):
    assert client.get("/api/v1/events", params=params, headers=login("user1")).status_code == 422


def test_read_own_event(client, login):
    resp = client.get("/api/v1/events/1", headers=login("user1"))
    assert resp.status_code == 200
    assert resp.json()["date"] == "1990-03-14"


def test_read_foreign_event_is_403(client, login):
    resp = client.get("/api/v1/events/3", headers=login("user1"))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Only own events can be read."


def test_missing_event_is_404(client, login):
    resp = client.get("/api/v1/events/999", headers=login("user1"))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Event not found"


def test_create_defaults_owner_to_principal(client, login):
    headers = login("user2")
    resp = client.post("/api/v1/events", json=NEW_EVENT, headers=headers)

    assert resp.status_code == 201
    assert resp.json()["user_id"] == 2
    assert client.get("/api/v1/events", headers=headers).headers["X-Total-Count"] == "2"


def test_create_for_other_user_is_403(client, login):
    resp = client.post("/api/v1/events", json={**NEW_EVENT, "user_id": 2}, headers=login("user1"))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Only own events can be added."


def test_create_for_unknown_user_is_422(client, login):
    resp = client.post("/api/v1/events", json={**NEW_EVENT, "user_id": 999}, headers=login("user1"))
    assert resp.status_code == 422


def test_patch_keeps_unsent_fields(client, login):
    resp = client.patch("/api/v1/events/2", json={"name": "Anniversary"}, headers=login("user1"))

    assert resp.status_code == 200
    assert resp.json()["name"] == "Anniversary"
    assert resp.json()["date"] == "2015-06-20"
    assert resp.json()["type"] == 1


def test_put_replaces_event(client, login):
    payload = {"name": "Birthday", "date": "1990-03-15"}
    resp = client.put("/api/v1/events/1", json=payload, headers=login("user1"))

    assert resp.status_code == 200
    assert resp.json()["type"] == 0
    assert resp.json()["config"] == {}


def test_update_foreign_event_is_403(client, login):
    headers = login("user1")
    assert client.patch("/api/v1/events/3", json={"name": "Mine now"}, headers=headers).status_code == 403
    assert client.put("/api/v1/events/3", json={**NEW_EVENT}, headers=headers).status_code == 403


def test_delete_own_event(client, login):
    headers = login("user1")
    assert client.delete("/api/v1/events/1", headers=headers).status_code == 204
    assert client.get("/api/v1/events/1", headers=headers).status_code == 404
    assert client.get("/api/v1/events", headers=headers).headers["X-Total-Count"] == "1"


def test_delete_foreign_event_is_403(client, login):
    assert client.delete("/api/v1/events/3", headers=login("user1")).status_code == 403


def test_admin_cannot_create_for_other_user(client, login):
    # Admins skip row scoping only; the owner voter still applies.
    resp = client.post("/api/v1/events", json={**NEW_EVENT, "user_id": 1}, headers=login("admin"))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Only own events can be added."
