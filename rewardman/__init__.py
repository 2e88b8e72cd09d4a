"""
Django Rewardman - Location-gated ordering and loyalty ledger.

Usage:
    from rewardman import ledger, orders, redemptions
    from rewardman.geo import Coordinate, is_eligible

    order = orders.place_order(
        [{"menu_item": "jollof-rice", "quantity": 2}],
        account_code="ACC-001",
        coordinate=Coordinate(34.0522, -118.2437),
    )
    orders.advance(order.ref, "preparing")
    orders.advance(order.ref, "ready")
    orders.complete(order.ref)

    ledger.balance_of("ACC-001")
    redemptions.redeem("ACC-001", "tote-bag")
"""

_SERVICES = ("ledger", "accounts", "orders", "reservations", "redemptions")


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return importlib.import_module(f"rewardman.services.{name}")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_SERVICES)
__version__ = "0.1.0"
