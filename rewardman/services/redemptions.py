"""Redemption service - spend points on merchandise and gift cards.

The debit and the Redemption row are written in one transaction.atomic()
block: either both are visible or neither is.
"""

import logging
import secrets

from django.db import transaction

from rewardman.exceptions import InvalidTransition, ItemUnavailable, NotFound
from rewardman.models import (
    ItemCategory,
    LedgerReason,
    RedeemableItem,
    Redemption,
)
from rewardman.services import accounts, ledger
from rewardman.signals import (
    redemption_created,
    redemption_status_changed,
    send_on_commit,
)

logger = logging.getLogger(__name__)


def catalog() -> list[RedeemableItem]:
    """Active catalog items, cheapest first."""
    return list(RedeemableItem.objects.filter(is_active=True).order_by("points_cost", "name"))


def history(account_code: str) -> list[Redemption]:
    """Redemptions of an account, most recent first."""
    return list(
        Redemption.objects.filter(account__code=account_code)
        .select_related("item")
        .order_by("-created_at")
    )


def get(redemption_id: int) -> Redemption:
    try:
        return Redemption.objects.select_related("item", "account").get(pk=redemption_id)
    except (ValueError, TypeError, Redemption.DoesNotExist):
        raise NotFound("REDEMPTION_NOT_FOUND", redemption_id=redemption_id)


def redeem(
    account_code: str,
    item_code: str,
    delivery_address: str = "",
    pickup_notes: str = "",
) -> Redemption:
    """
    Exchange points for a catalog item.

    Args:
        account_code: Account code
        item_code: RedeemableItem code
        delivery_address: Where to ship merchandise (optional)
        pickup_notes: Notes for in-store pickup (optional)

    Returns:
        Redemption with points_spent frozen to the item's current cost

    Raises:
        NotFound: Unknown account or item
        ItemUnavailable: Inactive item or out-of-stock merchandise
        InsufficientBalance: Balance lower than the item cost
    """
    account = accounts.require(account_code)

    try:
        item = RedeemableItem.objects.get(code=item_code)
    except RedeemableItem.DoesNotExist:
        raise NotFound("ITEM_NOT_FOUND", item_code=item_code)

    if not item.is_available:
        raise ItemUnavailable(
            item_code=item.code,
            category=item.category,
            in_stock=item.in_stock,
            is_active=item.is_active,
        )

    with transaction.atomic():
        entry = ledger.debit(
            account.code,
            item.points_cost,
            LedgerReason.REDEMPTION,
            description=f"Redeemed {item.name}",
        )
        redemption = Redemption.objects.create(
            account=account,
            item=item,
            item_name=item.name,
            points_spent=item.points_cost,
            ledger_entry=entry,
            voucher_code=_voucher_code() if item.category == ItemCategory.GIFT_CARD else "",
            delivery_address=delivery_address,
            pickup_notes=pickup_notes,
        )

    logger.info(
        "Account %s redeemed %s for %d points",
        account.code,
        item.code,
        redemption.points_spent,
    )
    send_on_commit(redemption_created, sender=Redemption, redemption=redemption)
    return redemption


def update_status(redemption_id: int, status: str) -> Redemption:
    """
    Advance fulfilment: pending -> processing -> shipped -> delivered.

    Raises:
        InvalidTransition: If ``status`` is not the next step
    """
    target = str(status)

    with transaction.atomic():
        try:
            redemption = Redemption.objects.select_for_update().get(pk=redemption_id)
        except (ValueError, TypeError, Redemption.DoesNotExist):
            raise NotFound("REDEMPTION_NOT_FOUND", redemption_id=redemption_id)

        if not redemption.can_transition_to(target):
            raise InvalidTransition(
                redemption_id=redemption.pk,
                current=redemption.status,
                target=target,
            )

        previous = redemption.status
        redemption.status = target
        redemption.save(update_fields=["status", "updated_at"])

    send_on_commit(
        redemption_status_changed,
        sender=Redemption,
        redemption=redemption,
        previous_status=previous,
    )
    return redemption


def _voucher_code() -> str:
    return secrets.token_hex(8).upper()
