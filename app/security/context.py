from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable
from typing import Any

from sqlalchemy import Select

from app.security.errors import AccessDeniedError
from app.security.principal import Principal
from app.security.resources import ResourceType
from app.security.scoping import RowScopingFilter
from app.security.voters import AccessDecisionManager


@dataclass(frozen=True)
class AccessContext:
    """
    Per-request authorization context.

    Attached to:
    - request.state.access (FastAPI request lifetime)
    - Session.info["access"] (SQLAlchemy session lifetime), read by the
      row-scoping hook in app/db/filters.py
    """

    principal: Principal | None
    row_filter: RowScopingFilter
    decision_manager: AccessDecisionManager

    def scope(self, stmt: Select, resource_type: ResourceType) -> Select:
        return self.row_filter.apply(stmt, resource_type, self.principal)

    def is_granted(self, attribute: str | Iterable[str], subject: Any = None) -> bool:
        return self.decision_manager.decide(self.principal, attribute, subject)

    def deny_unless_granted(self, attribute: str, subject: Any = None, message: str | None = None) -> None:
        if not self.is_granted(attribute, subject):
            raise AccessDeniedError(attribute, message)
