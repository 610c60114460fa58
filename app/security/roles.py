"""
Role hierarchy.

    role_hierarchy:
      ROLE_ADMIN: [ROLE_USER]
      ROLE_SUPER_ADMIN: [ROLE_ADMIN]

A user holding ROLE_SUPER_ADMIN is treated as holding ROLE_ADMIN and
ROLE_USER too. The closure is computed once at startup; cycles are a
configuration error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


class RoleHierarchyError(ValueError):
    """Raised when the role hierarchy configuration is invalid."""


def _compute_reachable_roles(hierarchy: Mapping[str, Iterable[str]]) -> dict[str, frozenset[str]]:
    """
    Resolve the hierarchy into role -> every role it implies (itself included).

    Detect cycles and raise RoleHierarchyError if found.
    """

    reachable: dict[str, frozenset[str]] = {}
    visiting: set[str] = set()

    def dfs(role_name: str) -> frozenset[str]:
        if role_name in reachable:
            return reachable[role_name]
        if role_name in visiting:
            raise RoleHierarchyError(f"cycle detected in role hierarchy at {role_name!r}")
        visiting.add(role_name)
        roles = {role_name}
        for child in hierarchy.get(role_name, ()):
            roles.update(dfs(child))
        result = frozenset(roles)
        reachable[role_name] = result
        visiting.remove(role_name)
        return result

    for name in hierarchy.keys():
        dfs(name)

    return reachable


class RoleHierarchy:
    def __init__(self, hierarchy: Mapping[str, Iterable[str]] | None = None) -> None:
        normalized = {str(k): tuple(str(r) for r in v) for k, v in (hierarchy or {}).items()}
        self._reachable = _compute_reachable_roles(normalized)

    def reachable(self, roles: Iterable[str]) -> frozenset[str]:
        """Return the given roles plus every role they imply."""

        result: set[str] = set()
        for role in roles:
            result.update(self._reachable.get(role, (role,)))
        return frozenset(result)
