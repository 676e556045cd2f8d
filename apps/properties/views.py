"""Property calendar and pricing API views."""

from __future__ import annotations

from rest_framework import permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from . import services
from .filters import AvailabilitySlotFilterSet
from .models import AvailabilitySlot
from .serializers import (
    AvailabilitySlotBulkSerializer,
    AvailabilitySlotSerializer,
    AvailabilitySlotUpdateSerializer,
    AvailabilitySlotWriteSerializer,
    CostCalculationSerializer,
    CostQuerySerializer,
    DynamicPricingRuleSerializer,
    DynamicPricingRuleToggleSerializer,
    DynamicPricingRuleUpdateSerializer,
    DynamicPricingRuleWriteSerializer,
)


class PropertyCalendarMixin:
    """Shared plumbing for views nested under a property.

    Ownership is decided by the services, so the views only need an
    authenticated user for writes. Service rejections are turned into
    ``{"detail": ...}`` responses.
    """

    property_lookup_url_kwarg = "property_id"
    permission_classes = [permissions.IsAuthenticated]

    service_error_statuses = (
        (services.NotFoundError, status.HTTP_404_NOT_FOUND),
        (services.ForbiddenError, status.HTTP_403_FORBIDDEN),
        (services.BadRequestError, status.HTTP_400_BAD_REQUEST),
    )

    def get_property_id(self):
        return self.kwargs[self.property_lookup_url_kwarg]

    def get_requester(self) -> services.Requester:
        return services.Requester.from_user(self.request.user)

    def handle_exception(self, exc):  # type: ignore
        for error_class, status_code in self.service_error_statuses:
            if isinstance(exc, error_class):
                return Response({"detail": str(exc)}, status=status_code)
        return super().handle_exception(exc)


class AvailabilitySlotViewSet(PropertyCalendarMixin, viewsets.GenericViewSet):
    """Availability slots of a property. Listing is public."""

    serializer_class = AvailabilitySlotSerializer
    queryset = AvailabilitySlot.objects.all()

    def get_permissions(self):  # type: ignore
        if self.action == "list":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return AvailabilitySlotWriteSerializer
        if self.action == "partial_update":
            return AvailabilitySlotUpdateSerializer
        if self.action == "bulk":
            return AvailabilitySlotBulkSerializer
        return AvailabilitySlotSerializer

    def list(self, request, property_id=None):  # type: ignore
        window = AvailabilitySlotFilterSet(request.query_params, queryset=AvailabilitySlot.objects.none())
        if not window.is_valid():
            raise serializers.ValidationError(window.errors)

        slots = services.get_slots(
            self.get_property_id(),
            start_date=window.form.cleaned_data.get("start_date"),
            end_date=window.form.cleaned_data.get("end_date"),
        )
        return Response(AvailabilitySlotSerializer(slots, many=True).data)

    def create(self, request, property_id=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = services.create_slot(self.get_property_id(), serializer.validated_data, self.get_requester())
        return Response(AvailabilitySlotSerializer(slot).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def bulk(self, request, property_id=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slots = services.create_bulk_slots(
            self.get_property_id(),
            serializer.validated_data["slots"],
            self.get_requester(),
        )
        return Response(AvailabilitySlotSerializer(slots, many=True).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, property_id=None, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        slot = services.update_slot(self.get_property_id(), pk, serializer.validated_data, self.get_requester())
        return Response(AvailabilitySlotSerializer(slot).data)

    def destroy(self, request, property_id=None, pk=None):  # type: ignore
        services.delete_slot(self.get_property_id(), pk, self.get_requester())
        return Response({"message": "Availability slot deleted successfully."}, status=status.HTTP_200_OK)


class DynamicPricingRuleViewSet(PropertyCalendarMixin, viewsets.GenericViewSet):
    """Dynamic pricing rules of a property, for its owner or an admin."""

    serializer_class = DynamicPricingRuleSerializer

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return DynamicPricingRuleWriteSerializer
        if self.action == "partial_update":
            return DynamicPricingRuleUpdateSerializer
        if self.action == "toggle":
            return DynamicPricingRuleToggleSerializer
        return DynamicPricingRuleSerializer

    def list(self, request, property_id=None):  # type: ignore
        rules = services.get_rules(self.get_property_id(), self.get_requester())
        return Response(DynamicPricingRuleSerializer(rules, many=True).data)

    def create(self, request, property_id=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rule = services.create_rule(self.get_property_id(), serializer.validated_data, self.get_requester())
        return Response(DynamicPricingRuleSerializer(rule).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, property_id=None, pk=None):  # type: ignore
        rule = services.get_rule(self.get_property_id(), pk, self.get_requester())
        return Response(DynamicPricingRuleSerializer(rule).data)

    def partial_update(self, request, property_id=None, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        rule = services.update_rule(self.get_property_id(), pk, serializer.validated_data, self.get_requester())
        return Response(DynamicPricingRuleSerializer(rule).data)

    def destroy(self, request, property_id=None, pk=None):  # type: ignore
        services.delete_rule(self.get_property_id(), pk, self.get_requester())
        return Response({"message": "Pricing rule deleted successfully."}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def toggle(self, request, property_id=None, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rule = services.toggle_rule_active(
            self.get_property_id(),
            pk,
            self.get_requester(),
            is_active=serializer.validated_data.get("is_active"),
        )
        return Response(DynamicPricingRuleSerializer(rule).data)


class CalculateCostView(PropertyCalendarMixin, APIView):
    """Public per-night cost breakdown for a stay."""

    permission_classes = [permissions.AllowAny]
    serializer_class = CostQuerySerializer

    def post(self, request, property_id):  # type: ignore
        query = CostQuerySerializer(data=request.data)
        query.is_valid(raise_exception=True)
        calculation = services.calculate_cost(
            property_id,
            query.validated_data["check_in"],
            query.validated_data["check_out"],
        )
        return Response(CostCalculationSerializer(calculation).data)
