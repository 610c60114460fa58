"""
Attribute voters and the access decision manager.

Routes ask "may the current principal do ATTRIBUTE on SUBJECT?", e.g.

    decide(principal, Attribute.EVENT_PATCH, event.user)

Item-level checks on child resources pass the *owning user* as subject, so
one voter covers calendars, calendar images, events, images and users.

Voters answer GRANTED / DENIED or ABSTAIN when the question is not theirs.
The decision manager combines votes with the affirmative strategy.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from enum import Enum, IntEnum
from typing import Any

from app.models.security import User
from app.security.principal import Principal
from app.security.resources import ResourceType
from app.security.scoping import AccessPolicy

logger = logging.getLogger(__name__)


class Vote(IntEnum):
    GRANTED = 1
    ABSTAIN = 0
    DENIED = -1


class Attribute(str, Enum):
    CALENDAR_DELETE = "CALENDAR_DELETE"
    CALENDAR_GET = "CALENDAR_GET"
    CALENDAR_PATCH = "CALENDAR_PATCH"
    CALENDAR_POST = "CALENDAR_POST"
    CALENDAR_PUT = "CALENDAR_PUT"

    CALENDAR_IMAGE_DELETE = "CALENDAR_IMAGE_DELETE"
    CALENDAR_IMAGE_GET = "CALENDAR_IMAGE_GET"
    CALENDAR_IMAGE_PATCH = "CALENDAR_IMAGE_PATCH"
    CALENDAR_IMAGE_POST = "CALENDAR_IMAGE_POST"
    CALENDAR_IMAGE_PUT = "CALENDAR_IMAGE_PUT"

    EVENT_DELETE = "EVENT_DELETE"
    EVENT_GET = "EVENT_GET"
    EVENT_PATCH = "EVENT_PATCH"
    EVENT_POST = "EVENT_POST"
    EVENT_PUT = "EVENT_PUT"

    IMAGE_DELETE = "IMAGE_DELETE"
    IMAGE_GET = "IMAGE_GET"
    IMAGE_PATCH = "IMAGE_PATCH"
    IMAGE_POST = "IMAGE_POST"
    IMAGE_PUT = "IMAGE_PUT"

    USER_DELETE = "USER_DELETE"
    USER_GET = "USER_GET"
    USER_PATCH = "USER_PATCH"
    USER_POST = "USER_POST"
    USER_PUT = "USER_PUT"


def attribute_for(resource_type: ResourceType, method: str) -> Attribute:
    """Attribute for an HTTP method on a resource type: (EVENT, "patch") -> EVENT_PATCH."""
    return Attribute(f"{resource_type.attribute_prefix}_{method.upper()}")


class Voter(ABC):
    """
    Base voter.

    Subclasses implement `supports()` and `vote_on_attribute()`; `vote()` is
    the entry point used by the decision manager.
    """

    @abstractmethod
    def supports(self, attribute: str, subject: Any) -> bool:
        ...

    @abstractmethod
    def vote_on_attribute(self, attribute: str, subject: Any, principal: Principal | None) -> bool:
        ...

    def vote(self, principal: Principal | None, subject: Any, attributes: Iterable[str]) -> Vote:
        vote = Vote.ABSTAIN
        for attribute in attributes:
            if not self.supports(attribute, subject):
                continue

            # At least one attribute is ours; deny unless one is granted.
            vote = Vote.DENIED
            if self.vote_on_attribute(attribute, subject, principal):
                return Vote.GRANTED
        return vote


class UserVoter(Voter):
    """
    Self-service voter: only the user itself may act on its user row and on
    the rows it owns.

    Users are provisioned by admins, so USER_POST is not supported here.
    """

    SUPPORTED_ATTRIBUTES: frozenset[str] = frozenset(a.value for a in Attribute) - {Attribute.USER_POST.value}

    def __init__(self, policy: AccessPolicy) -> None:
        self._policy = policy

    def supports(self, attribute: str, subject: Any) -> bool:
        if not isinstance(subject, User):
            return False
        return attribute in self.SUPPORTED_ATTRIBUTES

    def vote_on_attribute(self, attribute: str, subject: Any, principal: Principal | None) -> bool:
        if self._policy.public_access:
            return True

        if principal is None:
            return False

        return principal.id == subject.id


class RoleVoter(Voter):
    prefix = "ROLE_"

    def supports(self, attribute: str, subject: Any) -> bool:
        return attribute.startswith(self.prefix)

    def vote_on_attribute(self, attribute: str, subject: Any, principal: Principal | None) -> bool:
        if principal is None:
            return False
        return attribute in principal.roles


class AccessDecisionManager:
    """
    Affirmative strategy: grant if any voter grants; otherwise deny if any
    voter denies; if every voter abstains, fall back to `allow_if_all_abstain`.
    """

    def __init__(self, voters: Sequence[Voter], allow_if_all_abstain: bool = False) -> None:
        self._voters = tuple(voters)
        self._allow_if_all_abstain = allow_if_all_abstain

    def decide(self, principal: Principal | None, attribute: str | Iterable[str], subject: Any = None) -> bool:
        attributes = [attribute] if isinstance(attribute, str) else list(attribute)

        denied = 0
        for voter in self._voters:
            result = voter.vote(principal, subject, attributes)
            if result is Vote.GRANTED:
                logger.debug(
                    "Access granted attributes=%s principal=%s voter=%s",
                    _names(attributes),
                    _who(principal),
                    type(voter).__name__,
                )
                return True
            if result is Vote.DENIED:
                denied += 1

        if denied:
            logger.debug("Access denied attributes=%s principal=%s", _names(attributes), _who(principal))
            return False

        return self._allow_if_all_abstain


def _who(principal: Principal | None) -> str:
    return "anonymous" if principal is None else str(principal.id)


def _names(attributes: Iterable[str]) -> list[str]:
    return [a.value if isinstance(a, Enum) else a for a in attributes]


def default_decision_manager(policy: AccessPolicy) -> AccessDecisionManager:
    return AccessDecisionManager([RoleVoter(), UserVoter(policy)])
