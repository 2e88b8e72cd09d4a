"""Rewardman models."""

from rewardman.models.account import Account
from rewardman.models.ledger import LedgerEntry, LedgerReason
from rewardman.models.menu import MenuItem
from rewardman.models.order import Order, OrderItem, OrderStatus
from rewardman.models.reservation import Reservation, ReservationStatus
from rewardman.models.redemption import (
    ItemCategory,
    RedeemableItem,
    Redemption,
    RedemptionStatus,
)

__all__ = [
    # Accounts and ledger
    "Account",
    "LedgerEntry",
    "LedgerReason",
    # Ordering
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    # Reservations
    "Reservation",
    "ReservationStatus",
    # Redemptions
    "ItemCategory",
    "RedeemableItem",
    "Redemption",
    "RedemptionStatus",
]
