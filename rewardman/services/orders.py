"""Order service - placement, lifecycle and points on completion.

Transitions:
    pending -> preparing -> ready -> completed
    pending -> cancelled
    preparing -> cancelled

Every transition locks the order row (select_for_update) inside
transaction.atomic(), so two concurrent requests cannot both act on the
same observed state: the loser sees the new status and fails with
InvalidTransition.
"""

import logging
import uuid
from collections.abc import Mapping
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from rewardman import geo
from rewardman.adapters.menu import get_menu_catalog
from rewardman.conf import rewardman_settings
from rewardman.exceptions import InvalidAmount, InvalidTransition, ItemUnavailable, NotFound
from rewardman.models import Account, LedgerReason, Order, OrderItem, OrderStatus
from rewardman.services import accounts, ledger
from rewardman.signals import (
    order_cancelled,
    order_completed,
    order_placed,
    order_status_changed,
    send_on_commit,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

_ROUNDING_MODES = {
    "floor": ROUND_FLOOR,
    "round": ROUND_HALF_UP,
}


def points_for_total(total: Decimal) -> int:
    """
    Points earned for an order total.

    POINTS_PER_CURRENCY_UNIT points per whole currency unit, rounded with
    POINTS_ROUNDING ("floor" by default: 32.99 -> 32).
    """
    rate = rewardman_settings.POINTS_PER_CURRENCY_UNIT
    rounding = _ROUNDING_MODES[rewardman_settings.POINTS_ROUNDING]
    points = (Decimal(total) * rate).to_integral_value(rounding=rounding)
    return max(0, int(points))


def get(order_ref) -> Order:
    """Get order by ref or raise NotFound."""
    try:
        ref = uuid.UUID(str(order_ref))
        return Order.objects.select_related("account").get(ref=ref)
    except (ValueError, Order.DoesNotExist):
        raise NotFound("ORDER_NOT_FOUND", order_ref=str(order_ref))


def history(account_code: str, limit: int = 20) -> list[Order]:
    """Orders of an account, most recent first."""
    return list(
        Order.objects.filter(account__code=account_code)
        .prefetch_related("items")
        .order_by("-placed_at")[:limit]
    )


def place_order(
    items,
    account_code: str | None = None,
    coordinate=None,
    pickup_notes: str = "",
) -> Order:
    """
    Create a pending order priced from the menu catalog.

    Args:
        items: List of {"menu_item": code, "quantity": n} or (code, n)
        account_code: Account code, or None for a guest order
        coordinate: Customer location (Coordinate or (lat, lon)), optional
        pickup_notes: Free-text notes for the kitchen

    Returns:
        Order. ``order.geofence_warning`` is True when the location was
        outside the restaurant zone; the order is still created.

    Raises:
        InvalidAmount: Empty order or bad quantity
        NotFound: Unknown account or menu item
        ItemUnavailable: Menu item not available
        InvalidCoordinate: Malformed coordinate
    """
    lines = _parse_lines(items)

    account = accounts.require(account_code) if account_code is not None else None

    geofence_passed = None
    if coordinate is not None:
        geofence_passed = geo.is_eligible(coordinate)
        if not geofence_passed:
            logger.warning(
                "Order for %s placed outside the restaurant geofence",
                account_code or "guest",
            )

    priced = _price_lines(lines)
    total = sum((price * quantity for _, _, price, quantity in priced), Decimal("0"))
    total = total.quantize(CENT)

    with transaction.atomic():
        order = Order.objects.create(
            account=account,
            total=total,
            pickup_notes=pickup_notes,
            geofence_check_passed=geofence_passed,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    position=position,
                    menu_item_code=code,
                    name=name,
                    unit_price=price,
                    quantity=quantity,
                )
                for position, (code, name, price, quantity) in enumerate(priced, start=1)
            ]
        )

    logger.info("Order %s placed: %s items, total %s", order.ref, len(priced), total)
    send_on_commit(order_placed, sender=Order, order=order)
    return order


def advance(order_ref, target_status: str, expected_status: str | None = None) -> Order:
    """
    Move an order to ``target_status``.

    Args:
        order_ref: Order ref
        target_status: OrderStatus value
        expected_status: Status the caller last saw; a mismatch means the
            request is stale and fails

    Raises:
        InvalidTransition: If the move is not in the transition table or
            the order is no longer in ``expected_status``
    """
    target = str(target_status)

    with transaction.atomic():
        order = _get_for_update(order_ref)
        _check_transition(order, target, expected_status)

        if target == OrderStatus.COMPLETED:
            _complete(order)
        elif target == OrderStatus.CANCELLED:
            _cancel(order, reason="")
        else:
            previous = order.status
            order.status = target
            order.save(update_fields=["status", "updated_at"])
            _status_changed(order, previous)

    return order


def complete(order_ref) -> Order:
    """
    Complete a ready order and credit its points.

    Idempotent: completing an already completed order returns it unchanged
    and credits nothing.

    Raises:
        InvalidTransition: If the order is not ready (nor completed)
    """
    with transaction.atomic():
        order = _get_for_update(order_ref)
        if order.status == OrderStatus.COMPLETED:
            return order
        _check_transition(order, OrderStatus.COMPLETED, None)
        _complete(order)
    return order


def cancel(order_ref, reason: str = "") -> Order:
    """
    Cancel a pending or preparing order.

    Raises:
        InvalidTransition: If the order is ready, completed or cancelled
    """
    with transaction.atomic():
        order = _get_for_update(order_ref)
        _check_transition(order, OrderStatus.CANCELLED, None)
        _cancel(order, reason=reason)
    return order


# ======================================================================
# Internals (called with the order row locked)
# ======================================================================


def _complete(order: Order) -> None:
    previous = order.status
    account = order.account
    if account is not None and not account.is_active:
        logger.warning(
            "Account %s of order %s is inactive, no points credited",
            account.code,
            order.ref,
        )
        account = None
    points = points_for_total(order.total) if account else 0

    order.status = OrderStatus.COMPLETED
    order.completed_at = timezone.now()
    order.points_earned = points
    order.save(update_fields=["status", "completed_at", "points_earned", "updated_at"])

    if account is not None:
        if points > 0:
            ledger.credit(
                account.code,
                points,
                LedgerReason.ORDER_PURCHASE,
                order=order,
                description=f"Order {str(order.ref)[:8]}",
            )
        _apply_first_order(account.pk, order)

    logger.info("Order %s completed: %d points", order.ref, points)
    _status_changed(order, previous)
    send_on_commit(order_completed, sender=Order, order=order)


def _apply_first_order(account_id: int, order: Order) -> None:
    """Mark the first completed order; pay the referrer once."""
    account = Account.objects.select_for_update().get(pk=account_id)
    if account.first_order_completed:
        return

    account.first_order_completed = True
    account.save(update_fields=["first_order_completed", "updated_at"])

    referrer = account.referred_by
    bonus = rewardman_settings.REFERRAL_FIRST_ORDER_BONUS_POINTS
    if referrer is None or bonus <= 0:
        return
    if not referrer.is_active:
        logger.warning(
            "Referrer %s of %s is inactive, first-order bonus skipped",
            referrer.code,
            account.code,
        )
        return

    ledger.credit(
        referrer.code,
        bonus,
        LedgerReason.REFERRAL_FIRST_ORDER,
        order=order,
        description=f"First order of referred account {account.code}",
    )


def _cancel(order: Order, reason: str) -> None:
    previous = order.status

    order.status = OrderStatus.CANCELLED
    order.cancelled_at = timezone.now()
    order.cancel_reason = reason[:200]
    order.save(update_fields=["status", "cancelled_at", "cancel_reason", "updated_at"])

    # Points are only credited on completion, which cannot be cancelled.
    # Reverse anything found anyway so the ledger never keeps them.
    credited = ledger.net_for_order(order)
    if credited > 0:
        logger.error(
            "Order %s cancelled with %d points credited, reversing", order.ref, credited
        )
        ledger.debit(
            order.account.code,
            credited,
            LedgerReason.MANUAL_ADJUSTMENT,
            order=order,
            description=f"Reversal for cancelled order {str(order.ref)[:8]}",
        )

    logger.info("Order %s cancelled (was %s)", order.ref, previous)
    _status_changed(order, previous)
    send_on_commit(order_cancelled, sender=Order, order=order)


def _status_changed(order: Order, previous: str) -> None:
    send_on_commit(order_status_changed, sender=Order, order=order, previous_status=previous)


def _check_transition(order: Order, target: str, expected_status: str | None) -> None:
    if expected_status is not None and order.status != str(expected_status):
        raise InvalidTransition(
            order_ref=str(order.ref),
            current=order.status,
            expected=str(expected_status),
            target=str(target),
            reason="stale state",
        )
    if not order.can_transition_to(target):
        raise InvalidTransition(
            order_ref=str(order.ref),
            current=order.status,
            target=str(target),
        )


def _get_for_update(order_ref) -> Order:
    """MUST be called inside transaction.atomic()."""
    try:
        ref = uuid.UUID(str(order_ref))
        return Order.objects.select_for_update().get(ref=ref)
    except (ValueError, Order.DoesNotExist):
        raise NotFound("ORDER_NOT_FOUND", order_ref=str(order_ref))


def _parse_lines(items) -> list[tuple[str, int]]:
    if not items:
        raise InvalidAmount("INVALID_ORDER", reason="order has no items")

    lines = []
    for raw in items:
        if isinstance(raw, Mapping):
            code = raw.get("menu_item")
            quantity = raw.get("quantity", 1)
        else:
            try:
                code, quantity = raw
            except (TypeError, ValueError):
                raise InvalidAmount("INVALID_ORDER", line=repr(raw))

        if not code:
            raise InvalidAmount("INVALID_ORDER", line=repr(raw), reason="missing menu item")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidAmount(
                menu_item=code,
                quantity=quantity,
                reason="quantity must be an integer >= 1",
            )
        lines.append((str(code), quantity))
    return lines


def _price_lines(lines: list[tuple[str, int]]) -> list[tuple[str, str, Decimal, int]]:
    """Look up authoritative prices: (code, name, unit_price, quantity)."""
    catalog = get_menu_catalog()
    priced = []
    for code, quantity in lines:
        info = catalog.get_menu_item(code)
        if info is None:
            raise NotFound("MENU_ITEM_NOT_FOUND", menu_item=code)
        if not info.is_available:
            raise ItemUnavailable("MENU_ITEM_UNAVAILABLE", menu_item=code)
        price = Decimal(info.price).quantize(CENT)
        if price < 0:
            raise InvalidAmount(menu_item=code, price=str(price), reason="negative price")
        priced.append((code, info.name, price, quantity))
    return priced
