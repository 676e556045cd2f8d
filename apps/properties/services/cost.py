"""Stay cost calculation.

Public read: no requester is needed. Every call re-reads the property,
its active rules and its available slots, so results always reflect
the current calendar.
"""

from __future__ import annotations

import logging
from datetime import date

from apps.properties.domain.pricing import CostCalculation, price_stay
from apps.properties.models import AvailabilitySlot, DynamicPricingRule
from shared.domain.value_objects import DateRange

from .access import get_property
from .exceptions import BadRequestError

logger = logging.getLogger(__name__)


def calculate_cost(property_id, check_in: date, check_out: date) -> CostCalculation:
    property_obj = get_property(property_id)
    if check_out <= check_in:
        raise BadRequestError("Check-out date must be after check-in date.")

    rules = list(
        DynamicPricingRule.objects.filter(property=property_obj).active().in_resolution_order()
    )
    slots = list(
        AvailabilitySlot.objects.filter(property=property_obj).available().order_by("start_date", "id")
    )

    try:
        calculation = price_stay(
            stay=DateRange(check_in, check_out),
            base_price=property_obj.base_price,
            currency=property_obj.currency,
            slots=slots,
            rules=rules,
            dynamic_pricing_enabled=property_obj.dynamic_pricing_enabled,
        )
        total = calculation.total
    except ValueError as exc:
        logger.error(f"Cannot price property {property_obj.pk}: {exc}")
        raise BadRequestError("Property pricing settings are invalid.") from exc

    logger.debug(
        f"Priced {calculation.nights} night(s) for property {property_obj.pk} "
        f"({check_in} - {check_out}) using {len(slots)} slot(s) and {len(rules)} rule(s): {total}"
    )
    return calculation
