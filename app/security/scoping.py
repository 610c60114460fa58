"""
Row scoping for tenant-owned resources.

Collection reads against calendars, calendar images, events, images and
users are narrowed to the rows owned by the current principal:

    SELECT ... FROM events WHERE events.user_id = :principal_id
    SELECT ... FROM users  WHERE users.id = :principal_id

Administrators and public-access mode see everything. The filter never
mutates the statement it is given; `apply()` returns a new Select.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Select

from app.models.security import ROLE_ADMIN, ROLE_SUPER_ADMIN
from app.security.errors import PrincipalRequiredError
from app.security.principal import Principal
from app.security.resources import OWNED_RESOURCES, OwnedResource, ResourceType

logger = logging.getLogger(__name__)


class JwtRole(str, Enum):
    """Role required to reach the API; PUBLIC_ACCESS switches access control off."""

    IS_AUTHENTICATED_FULLY = "IS_AUTHENTICATED_FULLY"
    PUBLIC_ACCESS = "PUBLIC_ACCESS"


@dataclass(frozen=True)
class AccessPolicy:
    jwt_role: JwtRole = JwtRole.IS_AUTHENTICATED_FULLY
    admin_roles: frozenset[str] = frozenset({ROLE_SUPER_ADMIN, ROLE_ADMIN})

    @property
    def public_access(self) -> bool:
        return self.jwt_role is JwtRole.PUBLIC_ACCESS


class RowScopingFilter:
    def __init__(
        self,
        policy: AccessPolicy,
        resources: Mapping[ResourceType, OwnedResource] = OWNED_RESOURCES,
    ) -> None:
        self._policy = policy
        self._resources = dict(resources)

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    def is_exempt(self, resource_type: ResourceType | str, principal: Principal | None) -> bool:
        """
        True when queries against `resource_type` pass through unfiltered:
        1. not a protected type
        2. principal is an administrator
        3. public-access mode
        """

        if resource_type not in self._resources:
            return True
        if principal is not None and principal.has_any_role(self._policy.admin_roles):
            return True
        if self._policy.public_access:
            return True
        return False

    def apply(self, stmt: Select, resource_type: ResourceType | str, principal: Principal | None) -> Select:
        if self.is_exempt(resource_type, principal):
            logger.debug("Row scope: pass-through resource=%s principal=%s", resource_type, _who(principal))
            return stmt

        if principal is None:
            # Fail closed: never fall back to unscoped rows.
            logger.info("Row scope: principal required but missing resource=%s", resource_type)
            raise PrincipalRequiredError("Authentication required")

        owned = self._resources[ResourceType(resource_type)]
        column = owned.owner_column(owned.model)
        logger.debug("Row scope: restrict resource=%s to principal=%s", resource_type, principal.id)
        return stmt.where(column == principal.id)


def _who(principal: Principal | None) -> str:
    return "anonymous" if principal is None else str(principal.id)
