"""Tests for the redemption engine."""

from unittest.mock import patch

import pytest

from rewardman.exceptions import (
    InsufficientBalance,
    InvalidTransition,
    ItemUnavailable,
    NotFound,
)
from rewardman.models import LedgerEntry, LedgerReason, RedeemableItem, Redemption
from rewardman.services import ledger, redemptions
from rewardman.signals import redemption_created

pytestmark = pytest.mark.django_db


@pytest.fixture
def funded(account):
    """ACC-001 with 3000 points."""
    ledger.credit(account.code, 3000, LedgerReason.MANUAL_ADJUSTMENT, description="Seed")
    return account


class TestRedeem:
    def test_redeem_merchandise(self, funded, tote):
        redemption = redemptions.redeem(funded.code, tote.code, delivery_address="12 Allen Ave")

        assert redemption.points_spent == 300
        assert redemption.item_name == "Tote Bag"
        assert redemption.status == "pending"
        assert redemption.voucher_code == ""
        assert redemption.delivery_address == "12 Allen Ave"
        assert ledger.balance_of(funded.code) == 2700

        entry = redemption.ledger_entry
        assert entry.delta == -300
        assert entry.reason == "redemption"

    def test_insufficient_balance(self, account, tote):
        with pytest.raises(InsufficientBalance, match="INSUFFICIENT_BALANCE"):
            redemptions.redeem(account.code, tote.code)

        assert ledger.balance_of(account.code) == 0
        assert not Redemption.objects.exists()

    def test_out_of_stock_merchandise(self, funded, tote):
        tote.in_stock = False
        tote.save()

        with pytest.raises(ItemUnavailable, match="ITEM_UNAVAILABLE"):
            redemptions.redeem(funded.code, tote.code)
        assert ledger.balance_of(funded.code) == 3000

    def test_gift_card_ignores_stock(self, funded, gift_card):
        redemption = redemptions.redeem(funded.code, gift_card.code)

        assert redemption.points_spent == 2500
        assert len(redemption.voucher_code) == 16
        assert ledger.balance_of(funded.code) == 500

    def test_inactive_item(self, funded, gift_card):
        gift_card.is_active = False
        gift_card.save()

        with pytest.raises(ItemUnavailable):
            redemptions.redeem(funded.code, gift_card.code)

    def test_unknown_item(self, funded):
        with pytest.raises(NotFound, match="ITEM_NOT_FOUND"):
            redemptions.redeem(funded.code, "yacht")

    def test_unknown_account(self, tote):
        with pytest.raises(NotFound, match="ACCOUNT_NOT_FOUND"):
            redemptions.redeem("NOPE", tote.code)

    def test_cost_frozen_at_redemption(self, funded, tote):
        redemption = redemptions.redeem(funded.code, tote.code)
        RedeemableItem.objects.filter(pk=tote.pk).update(points_cost=900, name="Big Tote")

        redemption.refresh_from_db()
        assert redemption.points_spent == 300
        assert redemption.item_name == "Tote Bag"

    def test_debit_rolled_back_when_record_fails(self, funded, tote):
        with patch.object(Redemption.objects, "create", side_effect=RuntimeError("disk full")):
            with pytest.raises(RuntimeError):
                redemptions.redeem(funded.code, tote.code)

        assert ledger.balance_of(funded.code) == 3000
        assert not LedgerEntry.objects.filter(reason=LedgerReason.REDEMPTION).exists()

    def test_redemption_created_signal(self, funded, tote, django_capture_on_commit_callbacks):
        received = []

        def handler(sender, redemption, **kwargs):
            received.append(redemption.item_name)

        redemption_created.connect(handler)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                redemptions.redeem(funded.code, tote.code)
        finally:
            redemption_created.disconnect(handler)

        assert received == ["Tote Bag"]


class TestFulfilment:
    def test_forward_flow(self, funded, tote):
        redemption = redemptions.redeem(funded.code, tote.code)

        for status in ("processing", "shipped", "delivered"):
            redemption = redemptions.update_status(redemption.pk, status)
            assert redemption.status == status

    def test_skipping_a_step_rejected(self, funded, tote):
        redemption = redemptions.redeem(funded.code, tote.code)
        with pytest.raises(InvalidTransition):
            redemptions.update_status(redemption.pk, "shipped")

    def test_backwards_rejected(self, funded, tote):
        redemption = redemptions.redeem(funded.code, tote.code)
        redemptions.update_status(redemption.pk, "processing")
        with pytest.raises(InvalidTransition):
            redemptions.update_status(redemption.pk, "pending")

    def test_unknown_redemption(self, db):
        with pytest.raises(NotFound, match="REDEMPTION_NOT_FOUND"):
            redemptions.update_status(999999, "processing")
        with pytest.raises(NotFound):
            redemptions.get(999999)


class TestQueries:
    def test_catalog_lists_active_items_cheapest_first(self, tote, gift_card):
        RedeemableItem.objects.create(
            code="retired-mug", name="Mug", points_cost=100, is_active=False
        )
        assert [i.code for i in redemptions.catalog()] == ["tote-bag", "gift-25"]

    def test_history(self, funded, tote, gift_card, referrer):
        first = redemptions.redeem(funded.code, tote.code)
        second = redemptions.redeem(funded.code, gift_card.code)

        assert {r.pk for r in redemptions.history(funded.code)} == {first.pk, second.pk}
        assert redemptions.history(referrer.code) == []
