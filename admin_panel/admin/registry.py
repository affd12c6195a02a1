"""Registry of model items, keyed by URL alias."""

import logging

from admin_panel.admin.model_item import ModelItem
from admin_panel.core.exceptions import UnknownModelError

logger = logging.getLogger(__name__)


class AdminRegistry:
    def __init__(self):
        self._items: dict[str, ModelItem] = {}

    def register(self, item: ModelItem) -> ModelItem:
        if item.alias in self._items:
            raise ValueError(f"Alias {item.alias!r} is already registered")
        self._items[item.alias] = item
        logger.debug("registered admin model %s as %r", item.model.__name__, item.alias)
        return item

    def get(self, alias: str) -> ModelItem:
        try:
            return self._items[alias]
        except KeyError:
            raise UnknownModelError(alias) from None

    def all(self) -> list[ModelItem]:
        return list(self._items.values())

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, alias: str) -> bool:
        return alias in self._items


# Process-wide registry populated by admin_panel.admin.bootstrap
admin = AdminRegistry()
