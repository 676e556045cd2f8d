"""
Common Value Objects

Value objects used across the calendar and pricing code:
- Money: Represents monetary amounts in a single currency
- DateRange: Represents a range of calendar dates (slot, rule window, stay)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from shared.domain.base import ValueObject

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations. The amount is kept
    unrounded; call rounded() when presenting it.
    """
    amount: Decimal
    currency: str = 'EUR'

    def __post_init__(self):
        # Validation
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValueError(f"Invalid currency code: {self.currency}")

    @classmethod
    def zero(cls, currency: str) -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def rounded(self) -> Decimal:
        """Amount quantized to cents, half away from zero."""
        return self.amount.quantize(CENT, rounding=ROUND_HALF_UP)

    def __str__(self):
        return f"{self.rounded():,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date to end_date. Two overlap semantics
    coexist in the calendar code and both are exposed here:

    - overlaps_inclusive(): both bounds inclusive. Used when a new
      availability slot is checked against the existing ones, so slots
      that merely touch at a boundary date are rejected.
    - contains(): half-open, start inclusive and end exclusive. Used when
      a night is matched against a slot while pricing a stay.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        # Validation
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another (half-open)

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def overlaps_inclusive(self, other: 'DateRange') -> bool:
        """
        Check overlap treating both bounds as inclusive

        Examples:
            - DateRange(25, 28) overlaps DateRange(28, 31) -> True (shared boundary)
            - DateRange(25, 28) overlaps DateRange(29, 31) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return (self.start_date <= other.end_date and
                self.end_date >= other.start_date)

    def contains(self, check_date: date) -> bool:
        """
        Check if a date is within this range

        Note: start_date is inclusive, end_date is exclusive
        """
        return self.start_date <= check_date < self.end_date

    def iter_nights(self) -> Iterator[date]:
        """Yield the date of every night from start_date up to end_date."""
        for offset in range(len(self)):
            yield self.start_date + timedelta(days=offset)

    def __len__(self) -> int:
        """
        Return the number of nights in this range
        """
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
