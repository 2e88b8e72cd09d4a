"""Tests for the admin registrations."""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from rewardman.models import Account, LedgerEntry, LedgerReason, Order, Redemption
from rewardman.services import ledger, redemptions


@pytest.fixture
def request_(admin_user):
    request = RequestFactory().get("/admin/")
    request.user = admin_user
    return request


class TestLedgerEntryAdmin:
    def test_read_only_even_for_superuser(self, request_):
        model_admin = admin.site._registry[LedgerEntry]

        assert not model_admin.has_add_permission(request_)
        assert not model_admin.has_change_permission(request_)
        assert not model_admin.has_delete_permission(request_)

    def test_delta_display(self, account):
        entry = ledger.credit(account.code, 25, "manual_adjustment")
        model_admin = admin.site._registry[LedgerEntry]
        assert "+25" in model_admin.delta_display(entry)


class TestOrderAdmin:
    @pytest.mark.parametrize(
        "passed,label",
        [(True, "in zone"), (False, "outside"), (None, "-")],
    )
    def test_geofence_badge(self, passed, label):
        model_admin = admin.site._registry[Order]
        assert label in model_admin.geofence_badge(Order(geofence_check_passed=passed))

    def test_status_is_read_only(self):
        assert "status" in admin.site._registry[Order].readonly_fields


def test_models_registered():
    for model in (Account, LedgerEntry, Order, Redemption):
        assert admin.site.is_registered(model)


class TestAccountAdmin:
    def test_referred_by_not_editable(self, request_, referred):
        model_admin = admin.site._registry[Account]
        form = model_admin.get_form(request_, referred, change=True)

        assert "referred_by" not in form.base_fields
        assert "first_order_completed" not in form.base_fields
        assert "display_name" in form.base_fields


class TestRedemptionAdmin:
    @pytest.fixture
    def redemption(self, account, tote):
        ledger.credit(account.code, 300, LedgerReason.MANUAL_ADJUSTMENT, description="Seed")
        return redemptions.redeem(account.code, tote.code)

    def test_status_not_editable(self, request_, redemption):
        model_admin = admin.site._registry[Redemption]
        form = model_admin.get_form(request_, redemption, change=True)

        assert "status" not in form.base_fields
        assert "delivery_address" in form.base_fields

    def test_cannot_add_or_delete(self, request_, redemption):
        model_admin = admin.site._registry[Redemption]

        assert not model_admin.has_add_permission(request_)
        assert not model_admin.has_delete_permission(request_, redemption)
