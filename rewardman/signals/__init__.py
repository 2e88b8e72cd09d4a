"""
Rewardman signals - public event API.

All signals are sent on transaction commit, so receivers (notifications,
payment capture, analytics) only see facts that were persisted.

Emitted signals:
- account_created: services.accounts.create_account()
- points_credited / points_debited: services.ledger postings
- order_placed: services.orders.place_order()
- order_status_changed: every order transition
- order_completed: services.orders.complete()
- order_cancelled: services.orders.cancel()
- reservation_created: services.reservations.create_reservation()
- reservation_status_changed: confirm/cancel
- redemption_created: services.redemptions.redeem()
- redemption_status_changed: services.redemptions.update_status()
"""

from django.db import transaction
from django.dispatch import Signal

account_created = Signal()  # sender=Account, account=Account

points_credited = Signal()  # sender=LedgerEntry, entry=LedgerEntry
points_debited = Signal()  # sender=LedgerEntry, entry=LedgerEntry

order_placed = Signal()  # sender=Order, order=Order
order_status_changed = Signal()  # sender=Order, order=Order, previous_status=str
order_completed = Signal()  # sender=Order, order=Order
order_cancelled = Signal()  # sender=Order, order=Order

reservation_created = Signal()  # sender=Reservation, reservation=Reservation
reservation_status_changed = Signal()  # sender=Reservation, reservation, previous_status

redemption_created = Signal()  # sender=Redemption, redemption=Redemption
redemption_status_changed = Signal()  # sender=Redemption, redemption, previous_status


def send_on_commit(signal: Signal, sender, **kwargs) -> None:
    """Send ``signal`` once the current transaction commits."""
    transaction.on_commit(lambda: signal.send(sender=sender, **kwargs))
