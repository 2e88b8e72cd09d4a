"""MenuCatalog adapters."""

from django.utils.module_loading import import_string

from rewardman.protocols.menu import MenuCatalog, MenuItemInfo


class ModelMenuCatalog:
    """
    Adapter that implements MenuCatalog with the local MenuItem table.

    Configuration in settings.py:
        REWARDMAN = {
            "MENU_CATALOG_BACKEND": "rewardman.adapters.menu.ModelMenuCatalog",
        }
    """

    def get_menu_item(self, code: str) -> MenuItemInfo | None:
        from rewardman.models import MenuItem

        try:
            item = MenuItem.objects.get(code=code)
        except MenuItem.DoesNotExist:
            return None

        return MenuItemInfo(
            code=item.code,
            name=item.name,
            price=item.price,
            is_available=item.is_available,
        )


def get_menu_catalog() -> MenuCatalog:
    """Instantiate the configured MENU_CATALOG_BACKEND."""
    from rewardman.conf import rewardman_settings

    backend_class = import_string(rewardman_settings.MENU_CATALOG_BACKEND)
    return backend_class()
