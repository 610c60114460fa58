from __future__ import annotations

from collections.abc import Callable


def require_roles(roles: list[str]) -> Callable:
    """
    Decorator-style role requirement for a single endpoint.

    Implementation detail:
    - This decorator does NOT perform auth itself.
    - It attaches metadata that our global security dependency reads
      *after* routing (during dependency resolution).
    - Any one of the roles is enough (hierarchy applies: ROLE_SUPER_ADMIN
      satisfies ROLE_ADMIN).
    """

    def decorator(fn: Callable) -> Callable:
        existing = set(getattr(fn, "__security_required_roles__", set()))
        setattr(fn, "__security_required_roles__", existing | set(roles))
        return fn

    return decorator
