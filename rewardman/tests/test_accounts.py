"""Tests for accounts and referral signup bonuses."""

import pytest

from rewardman.exceptions import NotFound, RewardmanError
from rewardman.models import Account, LedgerEntry
from rewardman.models.account import REFERRAL_CODE_ALPHABET, REFERRAL_CODE_LENGTH
from rewardman.services import accounts, ledger
from rewardman.signals import account_created

pytestmark = pytest.mark.django_db


class TestCreateAccount:
    def test_create(self, db):
        account = accounts.create_account("ACC-100", display_name="Ada", email=" Ada@Example.com ")

        assert account.code == "ACC-100"
        assert account.email == "ada@example.com"
        assert account.referred_by is None
        assert account.points_balance == 0
        assert not account.first_order_completed

    def test_referral_code_generated(self, account):
        assert len(account.referral_code) == REFERRAL_CODE_LENGTH
        assert set(account.referral_code) <= set(REFERRAL_CODE_ALPHABET)

    def test_duplicate_code(self, account):
        with pytest.raises(RewardmanError, match="ACCOUNT_EXISTS"):
            accounts.create_account(account.code)

    def test_unknown_referral_code(self, db):
        with pytest.raises(NotFound, match="REFERRAL_CODE_NOT_FOUND"):
            accounts.create_account("ACC-200", referral_code="ZZZZZZZZ")
        assert not Account.objects.filter(code="ACC-200").exists()

    def test_get_and_require(self, account):
        assert accounts.get(account.code) == account
        assert accounts.get("NOPE") is None
        with pytest.raises(NotFound, match="ACCOUNT_NOT_FOUND"):
            accounts.require("NOPE")

    def test_account_created_signal(self, db, django_capture_on_commit_callbacks):
        received = []

        def handler(sender, account, **kwargs):
            received.append(account.code)

        account_created.connect(handler)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                accounts.create_account("ACC-300")
        finally:
            account_created.disconnect(handler)

        assert received == ["ACC-300"]


class TestReferralSignup:
    def test_referred_account_gets_signup_bonus(self, referrer, referred):
        assert referred.referred_by == referrer
        assert ledger.balance_of(referred.code) == 500

        entry = LedgerEntry.objects.get(account=referred)
        assert entry.reason == "referral_signup"
        assert entry.delta == 500

    def test_referrer_gets_nothing_at_signup(self, referrer, referred):
        assert ledger.balance_of(referrer.code) == 0

    def test_referral_code_case_insensitive(self, referrer):
        account = accounts.create_account("ACC-LOWER", referral_code=referrer.referral_code.lower())
        assert account.referred_by == referrer

    def test_referrals_listed(self, referrer, referred):
        assert accounts.referrals(referrer.code) == [referred]
        assert accounts.get_by_referral_code(referrer.referral_code) == referrer

    def test_zero_bonus_skips_credit(self, referrer, settings):
        settings.REWARDMAN = {**settings.REWARDMAN, "REFERRAL_SIGNUP_BONUS_POINTS": 0}
        account = accounts.create_account("ACC-ZERO", referral_code=referrer.referral_code)

        assert account.referred_by == referrer
        assert not LedgerEntry.objects.filter(account=account).exists()
