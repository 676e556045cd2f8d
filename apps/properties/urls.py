"""URL routing for the property calendar and pricing endpoints."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import AvailabilitySlotViewSet, CalculateCostView, DynamicPricingRuleViewSet

availability_list = AvailabilitySlotViewSet.as_view({"get": "list", "post": "create"})
availability_detail = AvailabilitySlotViewSet.as_view({"patch": "partial_update", "delete": "destroy"})
availability_bulk = AvailabilitySlotViewSet.as_view({"post": "bulk"})

pricing_rule_list = DynamicPricingRuleViewSet.as_view({"get": "list", "post": "create"})
pricing_rule_detail = DynamicPricingRuleViewSet.as_view(
    {"get": "retrieve", "patch": "partial_update", "delete": "destroy"}
)
pricing_rule_toggle = DynamicPricingRuleViewSet.as_view({"post": "toggle"})

urlpatterns = [
    # Availability calendar
    path(
        "<int:property_id>/availability/",
        availability_list,
        name="property-availability-list",
    ),
    path(
        "<int:property_id>/availability/bulk/",
        availability_bulk,
        name="property-availability-bulk",
    ),
    path(
        "<int:property_id>/availability/calculate-cost/",
        CalculateCostView.as_view(),
        name="property-calculate-cost",
    ),
    path(
        "<int:property_id>/availability/<int:pk>/",
        availability_detail,
        name="property-availability-detail",
    ),
    # Dynamic pricing rules
    path(
        "<int:property_id>/pricing/rules/",
        pricing_rule_list,
        name="property-pricing-rule-list",
    ),
    path(
        "<int:property_id>/pricing/rules/<int:pk>/",
        pricing_rule_detail,
        name="property-pricing-rule-detail",
    ),
    path(
        "<int:property_id>/pricing/rules/<int:pk>/toggle/",
        pricing_rule_toggle,
        name="property-pricing-rule-toggle",
    ),
]
