from __future__ import annotations

import logging

from sqlalchemy import event
from sqlalchemy.orm import Session

from app.security.errors import PrincipalRequiredError

logger = logging.getLogger(__name__)

ROW_SCOPE_OPTION = "row_scope"


@event.listens_for(Session, "do_orm_execute")
def _apply_row_scope(execute_state) -> None:
    """
    Row scoping for collection reads.

    Collection endpoints tag their statement:
        select(Event).execution_options(row_scope=ResourceType.EVENT)
    and this hook swaps it for the scoped statement returned by
    RowScopingFilter.apply(). Untagged statements (item lookups by id,
    login lookups) pass through untouched.
    """

    if not execute_state.is_select:
        return

    resource_type = execute_state.execution_options.get(ROW_SCOPE_OPTION)
    if resource_type is None:
        return

    access = execute_state.session.info.get("access")
    if access is None:
        # Tagged query without a request context: fail closed.
        logger.warning("Row-scoped query without access context resource=%s", resource_type)
        raise PrincipalRequiredError("Authentication required")

    execute_state.statement = access.scope(execute_state.statement, resource_type)
