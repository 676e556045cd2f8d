"""Availability slot services.

Slots are date intervals of a property carrying an availability flag and
an optional nightly price. Creation rejects any slot whose dates overlap
an existing slot of the same property, both bounds taken as inclusive,
so two slots sharing a boundary date are rejected as well.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from django.db import transaction  # type: ignore

from apps.properties.filters import AvailabilitySlotFilterSet
from apps.properties.models import AvailabilitySlot

from .access import Requester, get_manageable_property, get_property
from .exceptions import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

SLOT_UPDATE_FIELDS = ("start_date", "end_date", "is_available", "price_per_night", "notes")


def _to_price(value: Any) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise BadRequestError("Price per night must be a decimal number.")


def _ensure_valid_range(start_date: date, end_date: date) -> None:
    if end_date <= start_date:
        raise BadRequestError("End date must be after start date.")


def _ensure_no_overlap(property_obj, start_date: date, end_date: date, *, exclude_id=None) -> None:
    overlapping = AvailabilitySlot.objects.filter(property=property_obj).overlapping(start_date, end_date)
    if exclude_id is not None:
        overlapping = overlapping.exclude(pk=exclude_id)
    if overlapping.exists():
        logger.warning(
            f"Rejected slot {start_date} - {end_date} for property {property_obj.pk}: overlap"
        )
        raise BadRequestError("Availability slot overlaps with an existing slot.")


def _get_slot(property_obj, slot_id) -> AvailabilitySlot:
    slot = AvailabilitySlot.objects.filter(pk=slot_id, property=property_obj).first()
    if slot is None:
        raise NotFoundError("Availability slot not found.")
    return slot


def create_slot(property_id, data: Mapping[str, Any], requester: Requester) -> AvailabilitySlot:
    """Create one slot after ownership, ordering and overlap checks.

    The property row is locked for the duration of the transaction so
    that two concurrent creations for the same property cannot both pass
    the overlap read.
    """

    with transaction.atomic():
        property_obj = get_manageable_property(property_id, requester, lock=True)

        start_date = data["start_date"]
        end_date = data["end_date"]
        _ensure_valid_range(start_date, end_date)
        _ensure_no_overlap(property_obj, start_date, end_date)

        is_available = data.get("is_available")
        slot = AvailabilitySlot.objects.create(
            property=property_obj,
            start_date=start_date,
            end_date=end_date,
            is_available=True if is_available is None else is_available,
            price_per_night=_to_price(data.get("price_per_night")),
            notes=data.get("notes") or "",
        )

    logger.info(f"Created availability slot {slot.pk} ({start_date} - {end_date}) for property {property_obj.pk}")
    return slot


def create_bulk_slots(
    property_id,
    slots: Iterable[Mapping[str, Any]],
    requester: Requester,
) -> list[AvailabilitySlot]:
    """Create slots one by one in input order.

    Not transactional: the first failure aborts the call, and slots
    created before it stay persisted.
    """

    get_manageable_property(property_id, requester)

    created: list[AvailabilitySlot] = []
    for position, slot_data in enumerate(slots):
        try:
            created.append(create_slot(property_id, slot_data, requester))
        except BadRequestError:
            logger.warning(
                f"Bulk slot creation for property {property_id} stopped at item {position}; "
                f"{len(created)} slot(s) already persisted"
            )
            raise

    logger.info(f"Bulk-created {len(created)} availability slot(s) for property {property_id}")
    return created


def get_slots(property_id, start_date: date | None = None, end_date: date | None = None):
    """Slots of a visible property intersecting the optional window, by start date."""

    property_obj = get_property(property_id)
    queryset = AvailabilitySlot.objects.filter(property=property_obj)
    filterset = AvailabilitySlotFilterSet(
        {"start_date": start_date, "end_date": end_date},
        queryset=queryset,
    )
    return filterset.qs.order_by("start_date", "id")


def update_slot(
    property_id,
    slot_id,
    changes: Mapping[str, Any],
    requester: Requester,
) -> AvailabilitySlot:
    """Apply a partial patch to a slot.

    Patching either date re-validates the merged interval: it must stay
    ordered and must not overlap a sibling slot.
    """

    with transaction.atomic():
        property_obj = get_manageable_property(property_id, requester, lock=True)
        slot = _get_slot(property_obj, slot_id)

        patch = {name: changes[name] for name in SLOT_UPDATE_FIELDS if name in changes}
        if "price_per_night" in patch:
            patch["price_per_night"] = _to_price(patch["price_per_night"])
        if "notes" in patch and patch["notes"] is None:
            patch["notes"] = ""

        if "start_date" in patch or "end_date" in patch:
            start_date = patch.get("start_date", slot.start_date)
            end_date = patch.get("end_date", slot.end_date)
            _ensure_valid_range(start_date, end_date)
            _ensure_no_overlap(property_obj, start_date, end_date, exclude_id=slot.pk)

        for attr, value in patch.items():
            setattr(slot, attr, value)
        if patch:
            slot.save(update_fields=list(patch))

    logger.info(f"Updated availability slot {slot.pk} of property {property_obj.pk}: {sorted(patch)}")
    return slot


def delete_slot(property_id, slot_id, requester: Requester) -> None:
    property_obj = get_manageable_property(property_id, requester)
    slot = _get_slot(property_obj, slot_id)
    slot.delete()
    logger.info(f"Deleted availability slot {slot_id} of property {property_obj.pk}")
