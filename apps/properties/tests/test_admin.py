"""Admin write paths for slots and pricing rules."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from apps.properties.models import AvailabilitySlot, DynamicPricingRule, Property
from apps.properties.services import calculate_cost
from apps.users.models import User


class PropertyAdminTestCase(TestCase):
    def setUp(self) -> None:
        self.superuser = User.objects.create_superuser(email="root@example.com", password="StrongPass123")
        self.owner = User.objects.create_user(email="host@example.com", password="StrongPass123")
        self.property = Property.objects.create(
            owner=self.owner,
            title="Old town loft",
            base_price=Decimal("100.00"),
            currency="EUR",
            status=Property.Status.ACTIVE,
        )
        self.client.force_login(self.superuser)

    def _rule_payload(self, **overrides) -> dict:
        payload = {
            "property": self.property.pk,
            "name": "Saturday surcharge",
            "day_of_week": "6",
            "start_date": "",
            "end_date": "",
            "price_multiplier": "1.50",
            "priority": "0",
            "is_active": "on",
        }
        payload.update(overrides)
        return payload

    def _slot_payload(self, start_date: str, end_date: str) -> dict:
        return {
            "property": self.property.pk,
            "start_date": start_date,
            "end_date": end_date,
            "is_available": "on",
            "price_per_night": "",
            "notes": "",
        }

    def _property_payload(self, **overrides) -> dict:
        payload = {
            "owner": self.owner.pk,
            "title": self.property.title,
            "status": self.property.status,
            "base_price": "100.00",
            "currency": "EUR",
        }
        for prefix in ("availability_slots", "pricing_rules"):
            payload.update(
                {
                    f"{prefix}-TOTAL_FORMS": "0",
                    f"{prefix}-INITIAL_FORMS": "0",
                    f"{prefix}-MIN_NUM_FORMS": "0",
                    f"{prefix}-MAX_NUM_FORMS": "1000",
                }
            )
        payload.update(overrides)
        return payload


class DynamicPricingRuleAdminTests(PropertyAdminTestCase):
    def test_adding_rule_enables_dynamic_pricing(self) -> None:
        response = self.client.post(reverse("admin:properties_dynamicpricingrule_add"), self._rule_payload())

        self.assertEqual(response.status_code, 302)
        self.property.refresh_from_db()
        self.assertTrue(self.property.dynamic_pricing_enabled)

        result = calculate_cost(self.property.id, date(2025, 1, 4), date(2025, 1, 5))
        self.assertEqual(result.breakdown[0].multiplier, Decimal("1.5"))
        self.assertEqual(result.breakdown[0].applied_rule, "Saturday surcharge")

    def test_deleting_last_rule_disables_dynamic_pricing(self) -> None:
        self.client.post(reverse("admin:properties_dynamicpricingrule_add"), self._rule_payload())
        rule = DynamicPricingRule.objects.get(property=self.property)

        response = self.client.post(
            reverse("admin:properties_dynamicpricingrule_delete", args=[rule.pk]),
            {"post": "yes"},
        )

        self.assertEqual(response.status_code, 302)
        self.property.refresh_from_db()
        self.assertFalse(self.property.dynamic_pricing_enabled)

    def test_bulk_delete_action_disables_dynamic_pricing(self) -> None:
        self.client.post(reverse("admin:properties_dynamicpricingrule_add"), self._rule_payload())
        rule = DynamicPricingRule.objects.get(property=self.property)

        response = self.client.post(
            reverse("admin:properties_dynamicpricingrule_changelist"),
            {"action": "delete_selected", "_selected_action": [rule.pk], "post": "yes"},
        )

        self.assertEqual(response.status_code, 302)
        self.assertFalse(DynamicPricingRule.objects.exists())
        self.property.refresh_from_db()
        self.assertFalse(self.property.dynamic_pricing_enabled)

    def test_rule_without_condition_is_rejected(self) -> None:
        response = self.client.post(
            reverse("admin:properties_dynamicpricingrule_add"),
            self._rule_payload(day_of_week=""),
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn(
            "A rule needs either a day of week or a date range.",
            response.context["adminform"].form.non_field_errors(),
        )
        self.assertFalse(DynamicPricingRule.objects.exists())

    def test_non_positive_multiplier_is_rejected(self) -> None:
        response = self.client.post(
            reverse("admin:properties_dynamicpricingrule_add"),
            self._rule_payload(price_multiplier="0"),
        )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(DynamicPricingRule.objects.exists())
        self.property.refresh_from_db()
        self.assertFalse(self.property.dynamic_pricing_enabled)

    def test_inline_rule_enables_dynamic_pricing(self) -> None:
        payload = self._property_payload(
            **{
                "pricing_rules-TOTAL_FORMS": "1",
                "pricing_rules-0-name": "Weekend",
                "pricing_rules-0-day_of_week": "6",
                "pricing_rules-0-start_date": "",
                "pricing_rules-0-end_date": "",
                "pricing_rules-0-price_multiplier": "1.50",
                "pricing_rules-0-priority": "0",
                "pricing_rules-0-is_active": "on",
                "pricing_rules-0-property": self.property.pk,
                "pricing_rules-0-id": "",
            }
        )

        response = self.client.post(reverse("admin:properties_property_change", args=[self.property.pk]), payload)

        self.assertEqual(response.status_code, 302)
        self.assertEqual(DynamicPricingRule.objects.filter(property=self.property).count(), 1)
        self.property.refresh_from_db()
        self.assertTrue(self.property.dynamic_pricing_enabled)

    def test_flag_cannot_be_enabled_without_rules(self) -> None:
        payload = self._property_payload(dynamic_pricing_enabled="on")

        response = self.client.post(reverse("admin:properties_property_change", args=[self.property.pk]), payload)

        self.assertEqual(response.status_code, 302)
        self.property.refresh_from_db()
        self.assertFalse(self.property.dynamic_pricing_enabled)


class AvailabilitySlotAdminTests(PropertyAdminTestCase):
    def test_overlapping_slot_is_rejected(self) -> None:
        url = reverse("admin:properties_availabilityslot_add")

        first = self.client.post(url, self._slot_payload("2025-01-01", "2025-01-05"))
        second = self.client.post(url, self._slot_payload("2025-01-03", "2025-01-08"))
        touching = self.client.post(url, self._slot_payload("2025-01-05", "2025-01-08"))

        self.assertEqual(first.status_code, 302)
        self.assertEqual(second.status_code, 200)
        self.assertIn(
            "Availability slot overlaps with an existing slot.",
            second.context["adminform"].form.non_field_errors(),
        )
        self.assertEqual(touching.status_code, 200)
        self.assertEqual(AvailabilitySlot.objects.filter(property=self.property).count(), 1)

    def test_inverted_range_is_rejected(self) -> None:
        response = self.client.post(
            reverse("admin:properties_availabilityslot_add"),
            self._slot_payload("2025-01-05", "2025-01-01"),
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("End date must be after start date.", response.context["adminform"].form.non_field_errors())
        self.assertFalse(AvailabilitySlot.objects.exists())

    def test_editing_slot_does_not_conflict_with_itself(self) -> None:
        slot = AvailabilitySlot.objects.create(
            property=self.property,
            start_date="2025-01-01",
            end_date="2025-01-05",
        )

        response = self.client.post(
            reverse("admin:properties_availabilityslot_change", args=[slot.pk]),
            self._slot_payload("2025-01-02", "2025-01-06"),
        )

        self.assertEqual(response.status_code, 302)
        slot.refresh_from_db()
        self.assertEqual(str(slot.end_date), "2025-01-06")

    def test_inline_rows_cannot_overlap_each_other(self) -> None:
        payload = self._property_payload(**{"availability_slots-TOTAL_FORMS": "2"})
        for index, (start_date, end_date) in enumerate((("2025-02-01", "2025-02-05"), ("2025-02-05", "2025-02-09"))):
            payload.update(
                {
                    f"availability_slots-{index}-start_date": start_date,
                    f"availability_slots-{index}-end_date": end_date,
                    f"availability_slots-{index}-is_available": "on",
                    f"availability_slots-{index}-price_per_night": "",
                    f"availability_slots-{index}-notes": "",
                    f"availability_slots-{index}-property": self.property.pk,
                    f"availability_slots-{index}-id": "",
                }
            )

        response = self.client.post(reverse("admin:properties_property_change", args=[self.property.pk]), payload)

        self.assertEqual(response.status_code, 200)
        self.assertFalse(AvailabilitySlot.objects.exists())
