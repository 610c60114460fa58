"""
Registry of resource types.

Calendar styles, holiday groups and holidays are shared reference data: they
have a ResourceType but no OWNED_RESOURCES entry, so row scoping leaves them
alone. Each protected type maps to its ORM model, the column that identifies the
owner in SQL, and how to reach the owning `User` from a loaded instance.
Adding a new tenant-owned type means adding one entry to OWNED_RESOURCES.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.models.calendar import Calendar, CalendarImage, Event, Image
from app.models.security import User


class ResourceType(str, Enum):
    CALENDAR = "calendar"
    CALENDAR_IMAGE = "calendar_image"
    CALENDAR_STYLE = "calendar_style"
    EVENT = "event"
    HOLIDAY = "holiday"
    HOLIDAY_GROUP = "holiday_group"
    IMAGE = "image"
    USER = "user"

    @property
    def attribute_prefix(self) -> str:
        """Prefix of the voter attributes for this type, e.g. CALENDAR_IMAGE."""
        return self.value.upper()


@dataclass(frozen=True)
class OwnedResource:
    model: type[Any]
    owner_column: Callable[[type[Any]], Any]
    owner_of: Callable[[Any], User]


def _owned_by_user_id(model: type[Any]) -> OwnedResource:
    return OwnedResource(
        model=model,
        owner_column=lambda cls: cls.user_id,
        owner_of=lambda obj: obj.user,
    )


OWNED_RESOURCES: Mapping[ResourceType, OwnedResource] = {
    ResourceType.CALENDAR: _owned_by_user_id(Calendar),
    ResourceType.CALENDAR_IMAGE: _owned_by_user_id(CalendarImage),
    ResourceType.EVENT: _owned_by_user_id(Event),
    ResourceType.IMAGE: _owned_by_user_id(Image),
    # A user owns exactly one user row: itself.
    ResourceType.USER: OwnedResource(
        model=User,
        owner_column=lambda cls: cls.id,
        owner_of=lambda obj: obj,
    ),
}


def resource_type_of(obj: Any) -> ResourceType | None:
    for resource_type, owned in OWNED_RESOURCES.items():
        if isinstance(obj, owned.model):
            return resource_type
    return None


def owner_of(obj: Any) -> User:
    """Return the owning user of a loaded tenant-owned instance."""

    resource_type = resource_type_of(obj)
    if resource_type is None:
        raise TypeError(f"{type(obj).__name__} is not a tenant-owned resource")
    return OWNED_RESOURCES[resource_type].owner_of(obj)
