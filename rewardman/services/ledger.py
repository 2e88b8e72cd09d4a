"""Points ledger service.

Append-only accounting of point credits and debits per account. The
balance of an account is the running balance of its latest entry.

Every posting is a single read-modify-write under a row lock on the
account (select_for_update) inside transaction.atomic(). The unique
(account, sequence) constraint catches any writer that slipped past the
lock; such collisions are retried up to LEDGER_MAX_RETRIES times.
"""

import logging
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction
from django.db.models import Sum

from rewardman.conf import rewardman_settings
from rewardman.exceptions import (
    InsufficientBalance,
    InvalidAmount,
    LedgerConflict,
    NotFound,
    RewardmanError,
)
from rewardman.models import Account, LedgerEntry, LedgerReason, Order
from rewardman.signals import points_credited, points_debited, send_on_commit

logger = logging.getLogger(__name__)


@dataclass
class LedgerAudit:
    """Result of checking one account's ledger."""

    account_code: str
    balance: int
    entries_sum: int
    entry_count: int
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


def credit(
    account_code: str,
    amount: int,
    reason: str,
    order: Order | None = None,
    description: str = "",
    created_by: str = "",
) -> LedgerEntry:
    """
    Add points to an account.

    Args:
        account_code: Account code
        amount: Points to add (positive integer)
        reason: LedgerReason value
        order: Related order (optional)
        description: Free-text note
        created_by: Who triggered the credit

    Returns:
        Created LedgerEntry

    Raises:
        InvalidAmount: If amount is not a positive integer
        NotFound: If the account does not exist or is inactive
        LedgerConflict: If concurrent writers exhausted the retries
    """
    _check_amount(amount)
    return _post(account_code, amount, reason, order, description, created_by)


def debit(
    account_code: str,
    amount: int,
    reason: str,
    order: Order | None = None,
    description: str = "",
    created_by: str = "",
) -> LedgerEntry:
    """
    Remove points from an account. Never partial, never below zero.

    Raises:
        InvalidAmount: If amount is not a positive integer
        InsufficientBalance: If the balance is lower than amount
        NotFound: If the account does not exist or is inactive
        LedgerConflict: If concurrent writers exhausted the retries
    """
    _check_amount(amount)
    return _post(account_code, -amount, reason, order, description, created_by)


def adjust(
    account_code: str,
    delta: int,
    description: str,
    created_by: str = "",
) -> LedgerEntry:
    """Staff award (delta > 0) or removal (delta < 0) of points."""
    if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
        raise InvalidAmount(amount=delta, reason="delta must be a non-zero integer")
    if not description or not description.strip():
        raise RewardmanError("ADJUSTMENT_DESCRIPTION_REQUIRED", account_code=account_code)

    post = credit if delta > 0 else debit
    return post(
        account_code,
        abs(delta),
        LedgerReason.MANUAL_ADJUSTMENT,
        description=description.strip(),
        created_by=created_by,
    )


def balance_of(account_code: str) -> int:
    """Current balance. Returns 0 if the account has no entries."""
    latest = (
        LedgerEntry.objects.filter(account__code=account_code)
        .order_by("-sequence")
        .first()
    )
    return latest.running_balance if latest else 0


def entries(account_code: str, limit: int = 50) -> list[LedgerEntry]:
    """Ledger history, most recent first."""
    return list(
        LedgerEntry.objects.filter(account__code=account_code)
        .select_related("order")
        .order_by("-sequence")[:limit]
    )


def net_for_order(order: Order) -> int:
    """Net points the order's own account holds because of this order."""
    if order.account_id is None:
        return 0
    total = LedgerEntry.objects.filter(
        order=order,
        account_id=order.account_id,
        reason__in=[LedgerReason.ORDER_PURCHASE, LedgerReason.MANUAL_ADJUSTMENT],
    ).aggregate(total=Sum("delta"))["total"]
    return total or 0


def verify(account_code: str) -> LedgerAudit:
    """
    Check the ledger invariants of one account.

    - sequences run 1..n without gaps
    - every running_balance equals the prefix sum of deltas and is >= 0
    - the latest running_balance equals the sum of all deltas
    """
    problems = []
    running = 0
    count = 0
    qs = LedgerEntry.objects.filter(account__code=account_code).order_by("sequence")
    for expected_sequence, entry in enumerate(qs.iterator(), start=1):
        count += 1
        running += entry.delta
        if entry.sequence != expected_sequence:
            problems.append(
                f"entry {entry.pk}: sequence {entry.sequence}, expected {expected_sequence}"
            )
        if entry.running_balance != running:
            problems.append(
                f"entry {entry.pk}: running_balance {entry.running_balance}, expected {running}"
            )
        if entry.running_balance < 0:
            problems.append(f"entry {entry.pk}: negative running_balance")

    balance = balance_of(account_code)
    if balance != running:
        problems.append(f"balance {balance} != sum of deltas {running}")

    return LedgerAudit(
        account_code=account_code,
        balance=balance,
        entries_sum=running,
        entry_count=count,
        problems=problems,
    )


def _check_amount(amount) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(amount=amount, reason="amount must be a positive integer")


def _post(
    account_code: str,
    delta: int,
    reason: str,
    order: Order | None,
    description: str,
    created_by: str,
) -> LedgerEntry:
    """Append one entry. Retries on sequence collisions."""
    if reason not in LedgerReason.values:
        raise RewardmanError("INVALID_REASON", message=f"Unknown ledger reason: {reason}")

    attempts = rewardman_settings.LEDGER_MAX_RETRIES
    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                account = _get_active_account_for_update(account_code)

                latest = (
                    LedgerEntry.objects.filter(account=account)
                    .order_by("-sequence")
                    .first()
                )
                balance = latest.running_balance if latest else 0
                sequence = latest.sequence + 1 if latest else 1

                if balance + delta < 0:
                    raise InsufficientBalance(
                        account_code=account_code,
                        available=balance,
                        requested=-delta,
                    )

                entry = LedgerEntry.objects.create(
                    account=account,
                    sequence=sequence,
                    delta=delta,
                    reason=reason,
                    running_balance=balance + delta,
                    order=order,
                    description=description,
                    created_by=created_by,
                )
        except IntegrityError:
            if attempt >= attempts:
                logger.error(
                    "Ledger conflict on %s after %d attempts", account_code, attempts
                )
                raise LedgerConflict(account_code=account_code, attempts=attempts)
            logger.warning(
                "Ledger conflict on %s (attempt %d/%d), retrying",
                account_code,
                attempt,
                attempts,
            )
            continue

        logger.info(
            "Ledger %s %+d (%s) -> %d",
            account_code,
            delta,
            reason,
            entry.running_balance,
        )
        signal = points_credited if delta > 0 else points_debited
        send_on_commit(signal, sender=LedgerEntry, entry=entry)
        return entry


def _get_active_account_for_update(account_code: str) -> Account:
    """
    Get active account with row-level lock for mutation.

    MUST be called inside transaction.atomic().
    """
    try:
        return Account.objects.select_for_update().get(code=account_code, is_active=True)
    except Account.DoesNotExist:
        raise NotFound("ACCOUNT_NOT_FOUND", account_code=account_code)
