"""Property calendar and pricing models.

The property itself is owned by the listing side of the marketplace; the
calendar code only reads its owner, status, base price and currency and
toggles ``dynamic_pricing_enabled``. Availability slots and dynamic
pricing rules hang off the property and drive the nightly cost
calculation.
"""

from __future__ import annotations

from datetime import date

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """Listed property that can be rented per night."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        PAUSED = "paused", _("Paused")
        DRAFT = "draft", _("Draft")
        DELETED = "deleted", _("Deleted")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(
        max_length=3,
        default="EUR",
        validators=[RegexValidator(r"^[A-Z]{3}$", _("Currency must be a 3-letter ISO code."))],
    )
    dynamic_pricing_enabled = models.BooleanField(
        default=False,
        help_text=_("Kept in sync with the presence of pricing rules."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_deleted(self) -> bool:
        return self.status == self.Status.DELETED


class AvailabilitySlotQuerySet(models.QuerySet):
    def overlapping(self, start_date: date, end_date: date):
        """Slots sharing at least one date with [start_date, end_date], both ends inclusive."""
        return self.filter(start_date__lte=end_date, end_date__gte=start_date)

    def available(self):
        return self.filter(is_available=True)


class AvailabilitySlot(models.Model):
    """Date interval of a property with an optional nightly price override."""

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="availability_slots",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    is_available = models.BooleanField(default=True)
    price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text=_("Overrides the property base price for nights inside the slot."),
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AvailabilitySlotQuerySet.as_manager()

    class Meta:
        verbose_name = _("Availability slot")
        verbose_name_plural = _("Availability slots")
        ordering = ["start_date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="availability_slot_valid_date_range",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "start_date", "end_date"], name="slot_property_dates_idx"),
            models.Index(fields=["is_available"], name="slot_is_available_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.property}: {self.start_date} - {self.end_date}"


class DynamicPricingRuleQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def in_resolution_order(self):
        """Higher priority first, earlier created first on ties."""
        return self.order_by("-priority", "created_at", "id")


class DynamicPricingRule(models.Model):
    """Conditional price multiplier keyed by day of week or by a date range."""

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="pricing_rules",
    )
    name = models.CharField(max_length=255)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    day_of_week = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(6)],
        help_text=_("0 = Sunday ... 6 = Saturday."),
    )
    price_multiplier = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        help_text=_("1.20 raises the nightly price by 20%, 0.80 lowers it by 20%."),
    )
    is_active = models.BooleanField(default=True)
    priority = models.IntegerField(
        default=0,
        help_text=_("Rules with a higher priority are evaluated first."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = DynamicPricingRuleQuerySet.as_manager()

    class Meta:
        verbose_name = _("Dynamic pricing rule")
        verbose_name_plural = _("Dynamic pricing rules")
        ordering = ["-priority", "created_at", "id"]
        indexes = [
            models.Index(fields=["property", "is_active", "priority"], name="rule_property_active_prio_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.property}: {self.name} x{self.price_multiplier}"
