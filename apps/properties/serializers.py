"""Serializers for the property calendar and pricing endpoints.

Write serializers only validate input shape (formats, ranges, types).
Business rules such as overlap, condition shape and ownership live in
``apps.properties.services``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP

from rest_framework import serializers  # type: ignore

from .domain.pricing import format_amount
from .models import AvailabilitySlot, DynamicPricingRule


class AvailabilitySlotSerializer(serializers.ModelSerializer):
    property_id = serializers.ReadOnlyField()

    class Meta:
        model = AvailabilitySlot
        fields = [
            "id",
            "property_id",
            "start_date",
            "end_date",
            "is_available",
            "price_per_night",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class AvailabilitySlotWriteSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    is_available = serializers.BooleanField(required=False)
    price_per_night = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AvailabilitySlotUpdateSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    is_available = serializers.BooleanField(required=False)
    price_per_night = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AvailabilitySlotBulkSerializer(serializers.Serializer):
    slots = AvailabilitySlotWriteSerializer(many=True, allow_empty=False)


class DynamicPricingRuleSerializer(serializers.ModelSerializer):
    property_id = serializers.ReadOnlyField()

    class Meta:
        model = DynamicPricingRule
        fields = [
            "id",
            "property_id",
            "name",
            "start_date",
            "end_date",
            "day_of_week",
            "price_multiplier",
            "is_active",
            "priority",
            "created_at",
        ]
        read_only_fields = fields


class DynamicPricingRuleWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    day_of_week = serializers.IntegerField(min_value=0, max_value=6, required=False, allow_null=True)
    # Parsed and range-checked by the pricing service.
    price_multiplier = serializers.CharField(max_length=32)
    is_active = serializers.BooleanField(required=False)
    priority = serializers.IntegerField(required=False)


class DynamicPricingRuleUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    day_of_week = serializers.IntegerField(min_value=0, max_value=6, required=False, allow_null=True)
    price_multiplier = serializers.CharField(max_length=32, required=False)
    is_active = serializers.BooleanField(required=False)
    priority = serializers.IntegerField(required=False)


class DynamicPricingRuleToggleSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False)


class CostQuerySerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()


class NightlyRateSerializer(serializers.Serializer):
    date = serializers.DateField()
    base_price = serializers.SerializerMethodField()
    multiplier = serializers.SerializerMethodField()
    final_price = serializers.DecimalField(max_digits=None, decimal_places=2, rounding=ROUND_HALF_UP)
    applied_rule = serializers.CharField(allow_null=True)

    def get_base_price(self, obj) -> str:
        return format_amount(obj.base_price)

    def get_multiplier(self, obj) -> str:
        return format_amount(obj.multiplier)

    def to_representation(self, instance):  # type: ignore
        data = super().to_representation(instance)
        if data.get("applied_rule") is None:
            data.pop("applied_rule", None)
        return data


class CostCalculationSerializer(serializers.Serializer):
    check_in = serializers.DateField(source="stay.start_date")
    check_out = serializers.DateField(source="stay.end_date")
    nights = serializers.IntegerField()
    base_price_per_night = serializers.SerializerMethodField()
    breakdown = NightlyRateSerializer(many=True)
    subtotal = serializers.DecimalField(
        source="subtotal.rounded", max_digits=None, decimal_places=2, rounding=ROUND_HALF_UP
    )
    total = serializers.DecimalField(
        source="total.rounded", max_digits=None, decimal_places=2, rounding=ROUND_HALF_UP
    )
    currency = serializers.CharField()

    def get_base_price_per_night(self, obj) -> str:
        return format_amount(obj.base_price_per_night)
