"""PUBLIC_ACCESS mode: no token needed, no row scoping, voters grant."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.security.config import load_security_config
from app.security.scoping import RowScopingFilter
from app.security.voters import default_decision_manager

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "security_config.yaml"


@pytest.fixture
def public_client(api_app):
    with TestClient(api_app) as c:
        # Same wiring as the lifespan with APP_JWT_ROLE=PUBLIC_ACCESS.
        config = load_security_config(REPO_CONFIG, "PUBLIC_ACCESS")
        api_app.state.security_config = config
        api_app.state.row_filter = RowScopingFilter(config.access_policy)
        api_app.state.decision_manager = default_decision_manager(config.access_policy)
        yield c


def test_anonymous_sees_every_row(public_client):
    resp = public_client.get("/api/v1/events")
    assert resp.status_code == 200
    assert resp.headers["X-Total-Count"] == "3"


def test_anonymous_item_access_is_granted(public_client):
    assert public_client.get("/api/v1/users/2").status_code == 200
    assert public_client.patch("/api/v1/events/3", json={"name": "Renamed"}).json()["name"] == "Renamed"


def test_token_still_resolves_principal(public_client):
    token = public_client.post("/api/v1/token/get", json={"email": "user1@example.com", "password": "user1"}).json()["token"]
    resp = public_client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.json()["id"] == 1

    # Scoping stays off even with a principal.
    events = public_client.get("/api/v1/events", headers={"Authorization": f"Bearer {token}"})
    assert events.headers["X-Total-Count"] == "3"


def test_me_without_token_is_401(public_client):
    assert public_client.get("/api/v1/users/me").status_code == 401


def test_role_protected_route_still_needs_token(public_client):
    payload = {"email": "new@calendar.io", "username": "newbie", "password": "pw"}
    assert public_client.post("/api/v1/users", json=payload).status_code == 401
