"""Property lookup and ownership checks shared by the calendar services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.properties.models import Property

from .exceptions import BadRequestError, ForbiddenError, NotFoundError

ADMIN_ROLE = "ADMIN"


@dataclass(frozen=True)
class Requester:
    """Authenticated caller as seen by the services: an id and a role."""

    id: Any
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_user(cls, user) -> "Requester":
        role = getattr(user, "role", "")
        if getattr(user, "is_superuser", False):
            role = ADMIN_ROLE
        return cls(id=user.pk, role=role)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def get_property(property_id) -> Property:
    """Return a property that is visible to the public calendar."""

    property_obj = Property.objects.filter(pk=property_id).first()
    if property_obj is None or property_obj.is_deleted:
        raise NotFoundError("Property not found.")
    return property_obj


def get_manageable_property(property_id, requester: Requester, *, lock: bool = False) -> Property:
    """Return a property the requester may manage.

    Checks run in a fixed order: existence, then ownership, then the
    soft-delete status. With ``lock=True`` the property row is locked for
    the rest of the surrounding transaction.
    """

    queryset = Property.objects.filter(pk=property_id)
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    property_obj = queryset.first()

    if property_obj is None:
        raise NotFoundError("Property not found.")
    if property_obj.owner_id != requester.id and not requester.is_admin:
        raise ForbiddenError("You can only manage your own properties.")
    if property_obj.is_deleted:
        raise BadRequestError("Cannot manage a deleted property.")
    return property_obj
