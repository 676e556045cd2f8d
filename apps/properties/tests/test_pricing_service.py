from datetime import date
from decimal import Decimal

import pytest

from apps.properties.models import DynamicPricingRule
from apps.properties.services import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    create_rule,
    delete_rule,
    get_rule,
    get_rules,
    parse_multiplier,
    reconcile_dynamic_pricing,
    toggle_rule_active,
    update_rule,
)


def _weekend_rule(**extra):
    return {"name": "Saturday surcharge", "day_of_week": 6, "price_multiplier": "1.5", **extra}


def _season_rule(**extra):
    return {
        "name": "Summer season",
        "start_date": date(2025, 6, 1),
        "end_date": date(2025, 8, 31),
        "price_multiplier": "1.2",
        **extra,
    }


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.5", Decimal("1.50")),
        ("0.8", Decimal("0.80")),
        (2, Decimal("2.00")),
        (" 1.25 ", Decimal("1.25")),
        ("1.005", Decimal("1.01")),
        ("999.99", Decimal("999.99")),
    ],
)
def test_parse_multiplier_accepts_positive_numbers(raw, expected):
    assert parse_multiplier(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["0", "-1", "-0.5", "abc", "", None, "NaN", "Infinity", "-Infinity", "0.001", "1000", "999.995", "1e30", True],
)
def test_parse_multiplier_rejects_invalid_values(raw):
    with pytest.raises(BadRequestError):
        parse_multiplier(raw)


@pytest.mark.django_db
def test_create_day_of_week_rule_with_defaults(listing, owner_requester):
    rule = create_rule(listing.id, _weekend_rule(), owner_requester)

    assert rule.is_active is True
    assert rule.priority == 0
    assert rule.price_multiplier == Decimal("1.50")
    assert rule.start_date is None and rule.end_date is None


@pytest.mark.django_db
def test_create_date_range_rule(listing, owner_requester):
    rule = create_rule(listing.id, _season_rule(priority=5, is_active=False), owner_requester)

    assert rule.day_of_week is None
    assert rule.priority == 5
    assert rule.is_active is False


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "No condition", "price_multiplier": "1.1"},
        {"name": "Only start", "start_date": date(2025, 6, 1), "price_multiplier": "1.1"},
        {"name": "Only end", "end_date": date(2025, 6, 1), "price_multiplier": "1.1"},
        {
            "name": "Inverted",
            "start_date": date(2025, 6, 10),
            "end_date": date(2025, 6, 1),
            "price_multiplier": "1.1",
        },
        {
            "name": "Empty range",
            "start_date": date(2025, 6, 1),
            "end_date": date(2025, 6, 1),
            "price_multiplier": "1.1",
        },
        {
            "name": "Both shapes",
            "day_of_week": 5,
            "start_date": date(2025, 6, 1),
            "end_date": date(2025, 6, 10),
            "price_multiplier": "1.1",
        },
    ],
)
def test_create_rule_rejects_invalid_condition_shape(listing, owner_requester, payload):
    with pytest.raises(BadRequestError):
        create_rule(listing.id, payload, owner_requester)

    listing.refresh_from_db()
    assert DynamicPricingRule.objects.count() == 0
    assert listing.dynamic_pricing_enabled is False


@pytest.mark.django_db
@pytest.mark.parametrize("multiplier", ["0", "-1.2", "abc", "NaN"])
def test_create_rule_rejects_invalid_multiplier(listing, owner_requester, multiplier):
    with pytest.raises(BadRequestError):
        create_rule(listing.id, _weekend_rule(price_multiplier=multiplier), owner_requester)
    assert DynamicPricingRule.objects.count() == 0


@pytest.mark.django_db
def test_create_rule_access_checks(listing, deleted_listing, owner_requester, stranger_requester):
    with pytest.raises(ForbiddenError):
        create_rule(listing.id, _weekend_rule(), stranger_requester)
    with pytest.raises(BadRequestError):
        create_rule(deleted_listing.id, _weekend_rule(), owner_requester)
    with pytest.raises(NotFoundError):
        create_rule(123456, _weekend_rule(), owner_requester)


@pytest.mark.django_db
def test_first_rule_enables_and_last_deletion_disables_dynamic_pricing(listing, owner_requester):
    assert listing.dynamic_pricing_enabled is False

    first = create_rule(listing.id, _weekend_rule(), owner_requester)
    listing.refresh_from_db()
    assert listing.dynamic_pricing_enabled is True

    second = create_rule(listing.id, _season_rule(), owner_requester)
    delete_rule(listing.id, first.id, owner_requester)
    listing.refresh_from_db()
    assert listing.dynamic_pricing_enabled is True

    delete_rule(listing.id, second.id, owner_requester)
    listing.refresh_from_db()
    assert listing.dynamic_pricing_enabled is False


@pytest.mark.django_db
def test_reconcile_leaves_owner_choice_alone_while_rules_exist(listing, owner_requester):
    create_rule(listing.id, _weekend_rule(), owner_requester)
    listing.refresh_from_db()
    listing.dynamic_pricing_enabled = False
    listing.save(update_fields=["dynamic_pricing_enabled"])

    assert reconcile_dynamic_pricing(listing) is False
    listing.refresh_from_db()
    assert listing.dynamic_pricing_enabled is False


@pytest.mark.django_db
def test_reconcile_disables_flag_without_rules(listing):
    listing.dynamic_pricing_enabled = True
    listing.save(update_fields=["dynamic_pricing_enabled"])

    assert reconcile_dynamic_pricing(listing) is False
    listing.refresh_from_db()
    assert listing.dynamic_pricing_enabled is False


@pytest.mark.django_db
def test_get_rules_orders_by_priority_then_creation(listing, owner_requester):
    low = create_rule(listing.id, _weekend_rule(name="Low", priority=1), owner_requester)
    high = create_rule(listing.id, _season_rule(name="High", priority=10), owner_requester)
    low_later = create_rule(listing.id, _weekend_rule(name="Low later", day_of_week=0, priority=1), owner_requester)

    rules = list(get_rules(listing.id, owner_requester))

    assert [rule.id for rule in rules] == [high.id, low.id, low_later.id]


@pytest.mark.django_db
def test_get_rules_access(listing, deleted_listing, owner_requester, stranger_requester, admin_requester):
    with pytest.raises(ForbiddenError):
        get_rules(listing.id, stranger_requester)
    with pytest.raises(NotFoundError):
        get_rules(deleted_listing.id, owner_requester)
    with pytest.raises(NotFoundError):
        get_rules(987654, owner_requester)
    assert list(get_rules(listing.id, admin_requester)) == []


@pytest.mark.django_db
def test_get_rule_of_another_property_is_not_found(listing, owner, owner_requester):
    other = listing.__class__.objects.create(
        owner=owner,
        title="Mountain cabin",
        status=listing.Status.ACTIVE,
        base_price=Decimal("90.00"),
    )
    rule = create_rule(other.id, _weekend_rule(), owner_requester)

    with pytest.raises(NotFoundError):
        get_rule(listing.id, rule.id, owner_requester)
    assert get_rule(other.id, rule.id, owner_requester).pk == rule.pk


@pytest.mark.django_db
def test_update_rule_validates_multiplier(listing, owner_requester):
    rule = create_rule(listing.id, _weekend_rule(), owner_requester)

    for invalid in ("0", "-3", "not-a-number"):
        with pytest.raises(BadRequestError):
            update_rule(listing.id, rule.id, {"price_multiplier": invalid}, owner_requester)

    updated = update_rule(listing.id, rule.id, {"price_multiplier": "1.75", "priority": 3}, owner_requester)
    updated.refresh_from_db()
    assert updated.price_multiplier == Decimal("1.75")
    assert updated.priority == 3
    assert updated.name == "Saturday surcharge"


@pytest.mark.django_db
def test_update_rule_validates_date_bounds(listing, owner_requester):
    rule = create_rule(listing.id, _season_rule(), owner_requester)

    with pytest.raises(BadRequestError):
        update_rule(listing.id, rule.id, {"end_date": date(2025, 5, 1)}, owner_requester)
    with pytest.raises(BadRequestError):
        update_rule(listing.id, rule.id, {"start_date": None}, owner_requester)

    update_rule(listing.id, rule.id, {"end_date": date(2025, 9, 15)}, owner_requester)
    rule.refresh_from_db()
    assert rule.end_date == date(2025, 9, 15)


@pytest.mark.django_db
def test_update_rule_may_combine_both_condition_shapes(listing, owner_requester):
    rule = create_rule(listing.id, _season_rule(), owner_requester)

    update_rule(listing.id, rule.id, {"day_of_week": 5}, owner_requester)

    rule.refresh_from_db()
    assert rule.day_of_week == 5
    assert rule.start_date == date(2025, 6, 1)


@pytest.mark.django_db
def test_update_rule_cannot_remove_the_only_weekday_condition(listing, owner_requester):
    rule = create_rule(listing.id, _weekend_rule(), owner_requester)

    with pytest.raises(BadRequestError):
        update_rule(listing.id, rule.id, {"day_of_week": None}, owner_requester)

    rule.refresh_from_db()
    assert rule.day_of_week == 6


@pytest.mark.django_db
def test_update_rule_cannot_remove_the_only_date_range(listing, owner_requester):
    rule = create_rule(listing.id, _season_rule(), owner_requester)

    with pytest.raises(BadRequestError):
        update_rule(listing.id, rule.id, {"start_date": None, "end_date": None}, owner_requester)

    rule.refresh_from_db()
    assert rule.start_date == date(2025, 6, 1)
    assert rule.end_date == date(2025, 8, 31)


@pytest.mark.django_db
def test_update_rule_may_swap_one_condition_for_the_other(listing, owner_requester):
    rule = create_rule(listing.id, _weekend_rule(), owner_requester)

    update_rule(
        listing.id,
        rule.id,
        {"day_of_week": None, "start_date": date(2025, 6, 1), "end_date": date(2025, 6, 30)},
        owner_requester,
    )

    rule.refresh_from_db()
    assert rule.day_of_week is None
    assert rule.start_date == date(2025, 6, 1)


@pytest.mark.django_db
def test_toggle_rule_active(listing, owner_requester, stranger_requester):
    rule = create_rule(listing.id, _weekend_rule(), owner_requester)

    assert toggle_rule_active(listing.id, rule.id, owner_requester, is_active=False).is_active is False
    assert toggle_rule_active(listing.id, rule.id, owner_requester, is_active=False).is_active is False
    assert toggle_rule_active(listing.id, rule.id, owner_requester).is_active is True
    assert toggle_rule_active(listing.id, rule.id, owner_requester).is_active is False

    with pytest.raises(ForbiddenError):
        toggle_rule_active(listing.id, rule.id, stranger_requester)
    with pytest.raises(NotFoundError):
        toggle_rule_active(listing.id, rule.id + 100, owner_requester)


@pytest.mark.django_db
def test_toggling_does_not_touch_dynamic_pricing_flag(listing, owner_requester):
    rule = create_rule(listing.id, _weekend_rule(), owner_requester)

    toggle_rule_active(listing.id, rule.id, owner_requester, is_active=False)

    listing.refresh_from_db()
    assert listing.dynamic_pricing_enabled is True


@pytest.mark.django_db
def test_delete_rule_requires_existing_rule(listing, owner_requester):
    with pytest.raises(NotFoundError):
        delete_rule(listing.id, 555, owner_requester)
