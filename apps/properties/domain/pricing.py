"""
Nightly Price Resolution

Pure functions that turn a property's slots and dynamic pricing rules
into a per-night price. No database access happens here: callers load
the rows and pass them in, already ordered.

Resolution for one night:
1. Base price: the first available slot whose [start, end) contains the
   night supplies its price_per_night; otherwise the property base price.
2. Multiplier: rules are scanned once in resolution order (priority
   desc, creation asc). For each rule the date range is tested first
   (both bounds inclusive), then the day of week. The first rule that
   matches wins and the scan stops.
3. Final price: base * multiplier, rounded to cents for display only.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from shared.domain.value_objects import CENT, DateRange, Money

NEUTRAL_MULTIPLIER = Decimal("1")


def sunday_based_weekday(night: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (night.weekday() + 1) % 7


def format_amount(value: Decimal) -> str:
    """
    Plain decimal string without exponent or trailing zeros

    Examples:
        Decimal("100.00") -> "100"
        Decimal("1.50") -> "1.5"
    """
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        normalized = normalized.quantize(Decimal("1"))
    return format(normalized, "f")


def rule_matches(rule, night: date) -> bool:
    """Date-range condition first, then day-of-week, within the same rule."""
    if rule.start_date is not None and rule.end_date is not None:
        if rule.start_date <= night <= rule.end_date:
            return True
    return rule.day_of_week is not None and rule.day_of_week == sunday_based_weekday(night)


def resolve_multiplier(rules: Iterable, night: date) -> Tuple[Decimal, Optional[str]]:
    """
    Return (multiplier, rule name) for a night

    ``rules`` must already be in resolution order. Returns the neutral
    multiplier and no name when nothing matches.
    """
    for rule in rules:
        if rule_matches(rule, night):
            return rule.price_multiplier, rule.name
    return NEUTRAL_MULTIPLIER, None


def find_slot_for_night(slots: Iterable, night: date):
    """First slot whose half-open [start_date, end_date) contains the night."""
    for slot in slots:
        if DateRange(slot.start_date, slot.end_date).contains(night):
            return slot
    return None


@dataclass(frozen=True)
class NightlyRate:
    """One line of the cost breakdown."""
    date: date
    base_price: Decimal
    multiplier: Decimal
    applied_rule: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        """Unrounded price of the night."""
        return self.base_price * self.multiplier

    @property
    def final_price(self) -> Decimal:
        return self.amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CostCalculation:
    """Theoretical cost of a stay in the property's own currency."""
    stay: DateRange
    base_price_per_night: Decimal
    currency: str
    breakdown: List[NightlyRate] = field(default_factory=list)

    @property
    def nights(self) -> int:
        return len(self.stay)

    @property
    def subtotal(self) -> Money:
        """Sum of the unrounded nightly amounts."""
        total = Money.zero(self.currency)
        for line in self.breakdown:
            total = total + Money(line.amount, self.currency)
        return total

    @property
    def total(self) -> Money:
        # No fee layer yet: total equals subtotal.
        return self.subtotal


def price_stay(
    stay: DateRange,
    base_price: Decimal,
    currency: str,
    slots: Sequence,
    rules: Sequence,
    dynamic_pricing_enabled: bool,
) -> CostCalculation:
    """Build the per-night breakdown for a stay."""
    breakdown = []
    for night in stay.iter_nights():
        slot = find_slot_for_night(slots, night)
        night_base = base_price
        if slot is not None and slot.price_per_night is not None:
            night_base = slot.price_per_night

        multiplier, applied_rule = NEUTRAL_MULTIPLIER, None
        if dynamic_pricing_enabled:
            multiplier, applied_rule = resolve_multiplier(rules, night)

        breakdown.append(NightlyRate(night, night_base, multiplier, applied_rule))

    return CostCalculation(
        stay=stay,
        base_price_per_night=base_price,
        currency=currency,
        breakdown=breakdown,
    )
