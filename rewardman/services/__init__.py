"""Rewardman services.

- ledger: point credits, debits, balances and audits
- accounts: signup and referrals
- orders: placement and order lifecycle
- reservations: table reservations
- redemptions: spending points on the catalog
"""

from rewardman.services import ledger
from rewardman.services import accounts
from rewardman.services import orders
from rewardman.services import reservations
from rewardman.services import redemptions

__all__ = ["ledger", "accounts", "orders", "reservations", "redemptions"]
