"""Admin registrations for properties, availability slots and pricing rules.

Admin writes go through the same checks as the API: slot forms reject
overlapping dates, rule forms reject malformed conditions and
multipliers, and every rule write reconciles the property's
``dynamic_pricing_enabled`` flag.
"""

from __future__ import annotations

from django import forms
from django.contrib import admin
from django.forms.models import BaseInlineFormSet

from shared.domain.value_objects import DateRange

from .models import AvailabilitySlot, DynamicPricingRule, Property
from .services.availability import _ensure_no_overlap, _ensure_valid_range
from .services.exceptions import BadRequestError
from .services.pricing import _validate_condition_shape, parse_multiplier, reconcile_dynamic_pricing

SLOT_OVERLAP_MESSAGE = "Availability slot overlaps with an existing slot."


class AvailabilitySlotAdminForm(forms.ModelForm):
    class Meta:
        model = AvailabilitySlot
        fields = ("property", "start_date", "end_date", "is_available", "price_per_night", "notes")

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get("start_date")
        end_date = cleaned_data.get("end_date")
        if start_date is None or end_date is None:
            return cleaned_data

        property_obj = cleaned_data.get("property")
        if property_obj is None and self.instance.property_id is not None:
            property_obj = self.instance.property

        try:
            _ensure_valid_range(start_date, end_date)
            if property_obj is not None:
                _ensure_no_overlap(property_obj, start_date, end_date, exclude_id=self.instance.pk)
        except BadRequestError as exc:
            raise forms.ValidationError(str(exc)) from exc
        return cleaned_data


class AvailabilitySlotInlineFormSet(BaseInlineFormSet):
    """Rejects rows of one submission that overlap each other."""

    def clean(self):
        super().clean()
        ranges = []
        for form in self.forms:
            if not hasattr(form, "cleaned_data") or not form.cleaned_data:
                continue
            if self.can_delete and self._should_delete_form(form):
                continue
            start_date = form.cleaned_data.get("start_date")
            end_date = form.cleaned_data.get("end_date")
            if start_date is None or end_date is None or end_date <= start_date:
                continue

            current = DateRange(start_date, end_date)
            if any(current.overlaps_inclusive(other) for other in ranges):
                raise forms.ValidationError(SLOT_OVERLAP_MESSAGE)
            ranges.append(current)


class DynamicPricingRuleAdminForm(forms.ModelForm):
    class Meta:
        model = DynamicPricingRule
        fields = (
            "property",
            "name",
            "day_of_week",
            "start_date",
            "end_date",
            "price_multiplier",
            "priority",
            "is_active",
        )

    def clean(self):
        cleaned_data = super().clean()
        try:
            _validate_condition_shape(cleaned_data)
            if cleaned_data.get("price_multiplier") is not None:
                cleaned_data["price_multiplier"] = parse_multiplier(cleaned_data["price_multiplier"])
        except BadRequestError as exc:
            raise forms.ValidationError(str(exc)) from exc
        return cleaned_data


class AvailabilitySlotInline(admin.TabularInline):
    model = AvailabilitySlot
    form = AvailabilitySlotAdminForm
    formset = AvailabilitySlotInlineFormSet
    extra = 0
    fields = ("start_date", "end_date", "is_available", "price_per_night", "notes")


class DynamicPricingRuleInline(admin.TabularInline):
    model = DynamicPricingRule
    form = DynamicPricingRuleAdminForm
    extra = 0
    fields = ("name", "day_of_week", "start_date", "end_date", "price_multiplier", "priority", "is_active")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "status", "base_price", "currency", "dynamic_pricing_enabled")
    list_filter = ("status", "currency", "dynamic_pricing_enabled")
    search_fields = ("title", "owner__email")
    inlines = (AvailabilitySlotInline, DynamicPricingRuleInline)
    readonly_fields = ("created_at", "updated_at")

    def save_formset(self, request, form, formset, change):
        super().save_formset(request, form, formset, change)
        if formset.model is DynamicPricingRule:
            reconcile_dynamic_pricing(form.instance, rule_added=bool(formset.new_objects))


@admin.register(AvailabilitySlot)
class AvailabilitySlotAdmin(admin.ModelAdmin):
    form = AvailabilitySlotAdminForm
    list_display = ("property", "start_date", "end_date", "is_available", "price_per_night")
    list_filter = ("is_available",)
    search_fields = ("property__title",)


@admin.register(DynamicPricingRule)
class DynamicPricingRuleAdmin(admin.ModelAdmin):
    form = DynamicPricingRuleAdminForm
    list_display = ("name", "property", "price_multiplier", "day_of_week", "start_date", "end_date", "priority", "is_active")
    list_filter = ("is_active", "day_of_week")
    search_fields = ("name", "property__title")

    def save_model(self, request, obj, form, change):
        previous_property_id = form.initial.get("property") if change else None
        super().save_model(request, obj, form, change)
        reconcile_dynamic_pricing(obj.property, rule_added=not change)

        # Moving a rule to another property may leave the old one without rules.
        if previous_property_id is not None and previous_property_id != obj.property_id:
            reconcile_dynamic_pricing(Property.objects.get(pk=previous_property_id))

    def delete_model(self, request, obj):
        property_obj = obj.property
        super().delete_model(request, obj)
        reconcile_dynamic_pricing(property_obj)

    def delete_queryset(self, request, queryset):
        properties = list(Property.objects.filter(pk__in=queryset.values("property_id")))
        super().delete_queryset(request, queryset)
        for property_obj in properties:
            reconcile_dynamic_pricing(property_obj)
