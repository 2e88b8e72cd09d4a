"""Pytest fixtures for Rewardman tests."""

from decimal import Decimal

import pytest

from rewardman.models import MenuItem, RedeemableItem
from rewardman.services import accounts, orders

RESTAURANT = (34.0522, -118.2437)


@pytest.fixture
def menu(db):
    """Menu with two dishes and one sold-out item."""
    return {
        "jollof": MenuItem.objects.create(
            code="jollof-rice",
            name="Jollof Rice",
            price=Decimal("12.50"),
            category="mains",
        ),
        "suya": MenuItem.objects.create(
            code="suya",
            name="Beef Suya",
            price=Decimal("7.00"),
            category="starters",
        ),
        "puff": MenuItem.objects.create(
            code="puff-puff",
            name="Puff Puff",
            price=Decimal("4.99"),
            category="desserts",
            is_available=False,
        ),
    }


@pytest.fixture
def account(db):
    """Create a test account."""
    return accounts.create_account("ACC-001", display_name="Ada Obi", email="ada@example.com")


@pytest.fixture
def referrer(db):
    """Account whose referral code is shared."""
    return accounts.create_account("ACC-REF", display_name="Tunde Bello")


@pytest.fixture
def referred(referrer):
    """Account created with the referrer's code."""
    return accounts.create_account(
        "ACC-NEW",
        display_name="Chioma Eze",
        referral_code=referrer.referral_code,
    )


@pytest.fixture
def tote(db):
    return RedeemableItem.objects.create(
        code="tote-bag",
        name="Tote Bag",
        points_cost=300,
        category="merchandise",
    )


@pytest.fixture
def gift_card(db):
    return RedeemableItem.objects.create(
        code="gift-25",
        name="$25 Gift Card",
        points_cost=2500,
        category="gift_card",
        in_stock=False,
    )


@pytest.fixture
def two_line_items():
    """12.50 x 2 + 7.00 x 1 = 32.00"""
    return [
        {"menu_item": "jollof-rice", "quantity": 2},
        {"menu_item": "suya", "quantity": 1},
    ]


@pytest.fixture
def ready_order(menu, account, two_line_items):
    """Order for ACC-001 walked to ``ready``."""
    order = orders.place_order(two_line_items, account_code=account.code, coordinate=RESTAURANT)
    orders.advance(order.ref, "preparing")
    return orders.advance(order.ref, "ready")
