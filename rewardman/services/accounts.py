"""Account service - signup and referrals."""

import logging

from django.db import IntegrityError, transaction

from rewardman.conf import rewardman_settings
from rewardman.exceptions import NotFound, RewardmanError
from rewardman.models import Account, LedgerReason
from rewardman.services import ledger
from rewardman.signals import account_created, send_on_commit

logger = logging.getLogger(__name__)

# Attempts at drawing a referral code that is not taken yet
REFERRAL_CODE_ATTEMPTS = 5


def get(code: str) -> Account | None:
    """Get active account by code."""
    try:
        return Account.objects.select_related("referred_by").get(code=code, is_active=True)
    except Account.DoesNotExist:
        return None


def require(code: str) -> Account:
    """Get active account by code or raise NotFound."""
    account = get(code)
    if account is None:
        raise NotFound("ACCOUNT_NOT_FOUND", account_code=code)
    return account


def get_by_referral_code(referral_code: str) -> Account | None:
    try:
        return Account.objects.get(
            referral_code=referral_code.strip().upper(),
            is_active=True,
        )
    except Account.DoesNotExist:
        return None


def referrals(code: str) -> list[Account]:
    """Accounts that signed up with this account's referral code."""
    return list(Account.objects.filter(referred_by__code=code).order_by("created_at"))


def create_account(
    code: str,
    display_name: str = "",
    email: str = "",
    referral_code: str | None = None,
) -> Account:
    """
    Create an account, optionally referred by another one.

    A referred account receives REFERRAL_SIGNUP_BONUS_POINTS once, in the
    same transaction as its creation.

    Raises:
        RewardmanError: ACCOUNT_EXISTS if the code is taken
        NotFound: REFERRAL_CODE_NOT_FOUND if the referral code is unknown
    """
    referrer = None
    if referral_code:
        referrer = get_by_referral_code(referral_code)
        if referrer is None:
            raise NotFound("REFERRAL_CODE_NOT_FOUND", referral_code=referral_code)

    if Account.objects.filter(code=code).exists():
        raise RewardmanError("ACCOUNT_EXISTS", account_code=code)

    with transaction.atomic():
        account = _create_with_unique_referral_code(
            code=code,
            display_name=display_name,
            email=email,
            referred_by=referrer,
        )

        bonus = rewardman_settings.REFERRAL_SIGNUP_BONUS_POINTS
        if referrer is not None and bonus > 0:
            ledger.credit(
                account.code,
                bonus,
                LedgerReason.REFERRAL_SIGNUP,
                description=f"Signup with referral code {referrer.referral_code}",
            )

    logger.info(
        "Account %s created%s",
        account.code,
        f" (referred by {referrer.code})" if referrer else "",
    )
    send_on_commit(account_created, sender=Account, account=account)
    return account


def _create_with_unique_referral_code(**fields) -> Account:
    for attempt in range(1, REFERRAL_CODE_ATTEMPTS + 1):
        try:
            with transaction.atomic():
                return Account.objects.create(**fields)
        except IntegrityError:
            if Account.objects.filter(code=fields["code"]).exists():
                raise RewardmanError("ACCOUNT_EXISTS", account_code=fields["code"])
            if attempt == REFERRAL_CODE_ATTEMPTS:
                raise
            logger.warning("Referral code collision for %s, drawing again", fields["code"])
