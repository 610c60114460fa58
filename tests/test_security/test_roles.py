"""Tests for role hierarchy resolution and Principal construction."""

from __future__ import annotations

import pytest

from app.models.security import ROLE_ADMIN, ROLE_SUPER_ADMIN, ROLE_USER, User
from app.security.principal import Principal
from app.security.roles import RoleHierarchy, RoleHierarchyError

HIERARCHY = {ROLE_ADMIN: [ROLE_USER], ROLE_SUPER_ADMIN: [ROLE_ADMIN]}


def test_reachable_is_transitive():
    hierarchy = RoleHierarchy(HIERARCHY)
    assert hierarchy.reachable([ROLE_SUPER_ADMIN]) == {ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_USER}
    assert hierarchy.reachable([ROLE_ADMIN]) == {ROLE_ADMIN, ROLE_USER}


def test_unknown_role_maps_to_itself():
    assert RoleHierarchy(HIERARCHY).reachable(["ROLE_EDITOR"]) == {"ROLE_EDITOR"}


def test_empty_hierarchy():
    assert RoleHierarchy().reachable([ROLE_USER]) == {ROLE_USER}


def test_cycle_is_rejected():
    with pytest.raises(RoleHierarchyError, match="cycle"):
        RoleHierarchy({"ROLE_A": ["ROLE_B"], "ROLE_B": ["ROLE_A"]})


def test_effective_roles_always_include_role_user():
    assert User(roles=[]).effective_roles == [ROLE_USER]
    assert User(roles=[ROLE_ADMIN]).effective_roles == [ROLE_ADMIN, ROLE_USER]
    assert User(roles=[ROLE_USER]).effective_roles == [ROLE_USER]


def test_principal_from_user_expands_hierarchy():
    user = User(id=4, email="boss@example.com", username="boss", password_hash="x", roles=[ROLE_SUPER_ADMIN])

    principal = Principal.from_user(user, RoleHierarchy(HIERARCHY))

    assert principal.id == 4
    assert principal.username == "boss"
    assert principal.roles == {ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_USER}
    assert principal.has_any_role({ROLE_ADMIN})


def test_principal_without_hierarchy_keeps_stored_roles():
    user = User(id=5, email="u@example.com", username="u", password_hash="x", roles=[ROLE_SUPER_ADMIN])
    principal = Principal.from_user(user)
    assert not principal.has_any_role({ROLE_ADMIN})
