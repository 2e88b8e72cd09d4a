"""Menu catalog protocol for authoritative prices."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class MenuItemInfo:
    """Price and name of a menu item as the catalog knows it now."""

    code: str
    name: str
    price: Decimal
    is_available: bool = True


@runtime_checkable
class MenuCatalog(Protocol):
    """
    Protocol for looking up menu prices.

    Order totals are always recomputed from this source, never from
    client-supplied prices. Implemented by adapters/menu.py.

    Configuration in settings.py:
        REWARDMAN = {
            "MENU_CATALOG_BACKEND": "rewardman.adapters.menu.ModelMenuCatalog",
        }
    """

    def get_menu_item(self, code: str) -> MenuItemInfo | None:
        """
        Return the menu item, or None if the code is unknown.

        Args:
            code: Menu item code

        Returns:
            MenuItemInfo with the current price
        """
        ...
