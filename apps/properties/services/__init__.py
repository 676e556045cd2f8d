"""Calendar and pricing services for properties."""

from .access import Requester, get_manageable_property, get_property
from .availability import create_bulk_slots, create_slot, delete_slot, get_slots, update_slot
from .cost import calculate_cost
from .exceptions import BadRequestError, CalendarServiceError, ForbiddenError, NotFoundError
from .pricing import (
    create_rule,
    delete_rule,
    get_rule,
    get_rules,
    parse_multiplier,
    reconcile_dynamic_pricing,
    toggle_rule_active,
    update_rule,
)

__all__ = [
    "BadRequestError",
    "CalendarServiceError",
    "ForbiddenError",
    "NotFoundError",
    "Requester",
    "calculate_cost",
    "create_bulk_slots",
    "create_rule",
    "create_slot",
    "delete_rule",
    "delete_slot",
    "get_manageable_property",
    "get_property",
    "get_rule",
    "get_rules",
    "get_slots",
    "parse_multiplier",
    "reconcile_dynamic_pricing",
    "toggle_rule_active",
    "update_rule",
    "update_slot",
]
