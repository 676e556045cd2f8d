"""FilterSet definitions for the availability calendar."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import AvailabilitySlot


class AvailabilitySlotFilterSet(django_filters.FilterSet):
    """Query window for slot listing.

    A slot is kept when it touches the window: it is dropped only if it
    ends before ``start_date`` or starts after ``end_date``. Either bound
    may be omitted.
    """

    start_date = django_filters.DateFilter(field_name="end_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="start_date", lookup_expr="lte")

    class Meta:
        model = AvailabilitySlot
        fields = ["start_date", "end_date"]
