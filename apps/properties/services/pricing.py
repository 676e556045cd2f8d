"""Dynamic pricing rule services.

A rule multiplies the nightly base price either on one day of the week
or inside a date range. The property's ``dynamic_pricing_enabled`` flag
is derived from the rule population and maintained by
``reconcile_dynamic_pricing`` only.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping

from django.db import transaction  # type: ignore

from apps.properties.models import DynamicPricingRule, Property

from .access import Requester, get_manageable_property
from .exceptions import BadRequestError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

MULTIPLIER_STEP = Decimal("0.01")
# price_multiplier is DECIMAL(5, 2)
MULTIPLIER_LIMIT = Decimal("1000")

RULE_UPDATE_FIELDS = (
    "name",
    "start_date",
    "end_date",
    "day_of_week",
    "price_multiplier",
    "is_active",
    "priority",
)


def parse_multiplier(value: Any) -> Decimal:
    """Parse a multiplier into a positive 2-place decimal.

    Raises BadRequestError for unparseable, non-finite, non-positive or
    oversized values.
    """

    if isinstance(value, bool):
        raise BadRequestError("Price multiplier must be a positive number.")
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise BadRequestError("Price multiplier must be a positive number.")
    if not parsed.is_finite():
        raise BadRequestError("Price multiplier must be a positive number.")

    # Checked on both sides of rounding: 0.004 rounds to zero, 999.995 to 1000.
    _check_multiplier_bounds(parsed)
    parsed = parsed.quantize(MULTIPLIER_STEP, rounding=ROUND_HALF_UP)
    _check_multiplier_bounds(parsed)
    return parsed


def _check_multiplier_bounds(value: Decimal) -> None:
    if value <= 0:
        raise BadRequestError("Price multiplier must be a positive number.")
    if value >= MULTIPLIER_LIMIT:
        raise BadRequestError("Price multiplier must be lower than 1000.")


def _validate_date_bounds(start_date, end_date) -> None:
    if (start_date is None) != (end_date is None):
        raise BadRequestError("Both start date and end date are required for a date range rule.")
    if start_date is not None and end_date <= start_date:
        raise BadRequestError("End date must be after start date.")


def _validate_condition_shape(data: Mapping[str, Any]) -> None:
    start_date = data.get("start_date")
    end_date = data.get("end_date")
    day_of_week = data.get("day_of_week")

    _validate_date_bounds(start_date, end_date)
    _ensure_has_condition(day_of_week, start_date)
    if day_of_week is not None and start_date is not None:
        raise BadRequestError("A rule cannot combine a day of week with a date range.")


def _ensure_has_condition(day_of_week, start_date) -> None:
    if day_of_week is None and start_date is None:
        raise BadRequestError("A rule needs either a day of week or a date range.")


def _get_rule(property_obj: Property, rule_id) -> DynamicPricingRule:
    rule = DynamicPricingRule.objects.filter(pk=rule_id, property=property_obj).first()
    if rule is None:
        raise NotFoundError("Pricing rule not found.")
    return rule


def reconcile_dynamic_pricing(property_obj: Property, *, rule_added: bool = False) -> bool:
    """Bring ``dynamic_pricing_enabled`` in line with the property's rules.

    Forced off when the property has no rules left and forced on right
    after a rule is added. Any other state is left as the owner set it.
    Returns the resulting flag.
    """

    if rule_added:
        enabled = True
    elif not DynamicPricingRule.objects.filter(property=property_obj).exists():
        enabled = False
    else:
        return property_obj.dynamic_pricing_enabled

    if property_obj.dynamic_pricing_enabled != enabled:
        property_obj.dynamic_pricing_enabled = enabled
        property_obj.save(update_fields=["dynamic_pricing_enabled", "updated_at"])
        logger.info(f"Dynamic pricing {'enabled' if enabled else 'disabled'} for property {property_obj.pk}")
    return enabled


def create_rule(property_id, data: Mapping[str, Any], requester: Requester) -> DynamicPricingRule:
    with transaction.atomic():
        property_obj = get_manageable_property(property_id, requester, lock=True)
        _validate_condition_shape(data)
        multiplier = parse_multiplier(data.get("price_multiplier"))

        is_active = data.get("is_active")
        priority = data.get("priority")
        rule = DynamicPricingRule.objects.create(
            property=property_obj,
            name=data["name"],
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            day_of_week=data.get("day_of_week"),
            price_multiplier=multiplier,
            is_active=True if is_active is None else is_active,
            priority=0 if priority is None else priority,
        )
        reconcile_dynamic_pricing(property_obj, rule_added=True)

    logger.info(f"Created pricing rule {rule.pk} '{rule.name}' x{multiplier} for property {property_obj.pk}")
    return rule


def get_rules(property_id, requester: Requester):
    """Rules of a property in resolution order."""

    property_obj = Property.objects.filter(pk=property_id).first()
    if property_obj is None or property_obj.is_deleted:
        raise NotFoundError("Property not found.")
    if property_obj.owner_id != requester.id and not requester.is_admin:
        raise ForbiddenError("You can only manage your own properties.")
    return DynamicPricingRule.objects.filter(property=property_obj).in_resolution_order()


def get_rule(property_id, rule_id, requester: Requester) -> DynamicPricingRule:
    property_obj = get_manageable_property(property_id, requester)
    return _get_rule(property_obj, rule_id)


def update_rule(
    property_id,
    rule_id,
    changes: Mapping[str, Any],
    requester: Requester,
) -> DynamicPricingRule:
    """Apply a partial patch to a rule.

    Supplied dates and multiplier go through the same checks as on
    creation. A patch may leave both a day of week and a date range on
    one rule, but never neither.
    """

    with transaction.atomic():
        property_obj = get_manageable_property(property_id, requester)
        rule = _get_rule(property_obj, rule_id)

        patch = {name: changes[name] for name in RULE_UPDATE_FIELDS if name in changes}
        if "price_multiplier" in patch:
            patch["price_multiplier"] = parse_multiplier(patch["price_multiplier"])
        if "start_date" in patch or "end_date" in patch:
            _validate_date_bounds(
                patch.get("start_date", rule.start_date),
                patch.get("end_date", rule.end_date),
            )
        _ensure_has_condition(
            patch.get("day_of_week", rule.day_of_week),
            patch.get("start_date", rule.start_date),
        )

        for attr, value in patch.items():
            setattr(rule, attr, value)
        if patch:
            rule.save(update_fields=list(patch))

    logger.info(f"Updated pricing rule {rule.pk} of property {property_obj.pk}: {sorted(patch)}")
    return rule


def delete_rule(property_id, rule_id, requester: Requester) -> None:
    with transaction.atomic():
        property_obj = get_manageable_property(property_id, requester, lock=True)
        rule = _get_rule(property_obj, rule_id)
        rule.delete()
        reconcile_dynamic_pricing(property_obj)

    logger.info(f"Deleted pricing rule {rule_id} of property {property_obj.pk}")


def toggle_rule_active(
    property_id,
    rule_id,
    requester: Requester,
    is_active: bool | None = None,
) -> DynamicPricingRule:
    """Set a rule's active state, or flip it when no value is given."""

    property_obj = get_manageable_property(property_id, requester)
    rule = _get_rule(property_obj, rule_id)

    rule.is_active = (not rule.is_active) if is_active is None else is_active
    rule.save(update_fields=["is_active"])
    logger.info(f"Pricing rule {rule.pk} of property {property_obj.pk} is now {'active' if rule.is_active else 'inactive'}")
    return rule
