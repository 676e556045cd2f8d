"""Shared pytest fixtures for the calendar and pricing tests."""

from decimal import Decimal

import pytest

from apps.properties.models import Property
from apps.properties.services import Requester
from apps.users.models import User


@pytest.fixture
def owner(db):
    return User.objects.create_user(email="owner@example.com", password="StrongPass123")


@pytest.fixture
def stranger(db):
    return User.objects.create_user(email="stranger@example.com", password="StrongPass123")


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@example.com",
        password="StrongPass123",
        role=User.RoleChoices.ADMIN,
    )


@pytest.fixture
def owner_requester(owner):
    return Requester.from_user(owner)


@pytest.fixture
def stranger_requester(stranger):
    return Requester.from_user(stranger)


@pytest.fixture
def admin_requester(admin_user):
    return Requester.from_user(admin_user)


@pytest.fixture
def listing(owner):
    """Active property priced at 100 EUR per night."""
    return Property.objects.create(
        owner=owner,
        title="Seaside flat",
        status=Property.Status.ACTIVE,
        base_price=Decimal("100.00"),
        currency="EUR",
    )


@pytest.fixture
def deleted_listing(owner):
    return Property.objects.create(
        owner=owner,
        title="Removed flat",
        status=Property.Status.DELETED,
        base_price=Decimal("80.00"),
        currency="EUR",
    )
