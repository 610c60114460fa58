from __future__ import annotations


class AccessControlError(Exception):
    """Base class for authorization failures raised by the access-control core."""


class AccessPolicyUnavailableError(AccessControlError):
    """The access policy (security config) is not loaded or cannot be read."""


class PrincipalRequiredError(AccessControlError):
    """Row scoping is enforced but no principal was resolved for the request."""


class AccessDeniedError(AccessControlError):
    def __init__(self, attribute: str, message: str | None = None) -> None:
        # Attribute enums carry the plain name in .value
        self.attribute = str(getattr(attribute, "value", attribute))
        self.message = message or f"Access denied ({self.attribute})."
        super().__init__(self.message)
