"""Rewardman protocols."""

from rewardman.protocols.menu import MenuCatalog, MenuItemInfo

__all__ = [
    "MenuCatalog",
    "MenuItemInfo",
]
