from __future__ import annotations

from dataclasses import dataclass

from app.models.security import User
from app.security.roles import RoleHierarchy


@dataclass(frozen=True)
class Principal:
    """
    The authenticated actor of one request.

    Built from the database user (not from token claims) so that role changes
    take effect on the next request. `roles` is already hierarchy-expanded.
    """

    id: int
    username: str
    email: str
    roles: frozenset[str]

    def has_any_role(self, roles: frozenset[str] | set[str]) -> bool:
        return bool(self.roles & roles)

    @classmethod
    def from_user(cls, user: User, hierarchy: RoleHierarchy | None = None) -> Principal:
        roles = frozenset(user.effective_roles)
        if hierarchy is not None:
            roles = hierarchy.reachable(roles)
        return cls(id=user.id, username=user.username, email=user.email, roles=roles)
