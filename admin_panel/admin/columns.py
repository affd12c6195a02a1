"""
Display columns for admin listings.
A column turns one row into one cell. Plain columns map to attributes (dotted
names reach into relations); the rest are computed from the loaded instance.
"""

from collections.abc import Callable
from typing import Any

from admin_panel.db.inspection import read_attribute, resolve_path


class Column:
    """Attribute (or relation attribute) shown as-is."""

    def __init__(self, name: str, label: str | None = None):
        self.name = name
        self.label = label or name.replace(".", " ").replace("_", " ").capitalize()

    @property
    def is_relation_path(self) -> bool:
        return "." in self.name

    @property
    def relation(self) -> str | None:
        return self.name.split(".", 1)[0] if self.is_relation_path else None

    def render(self, instance: Any) -> Any:
        return resolve_path(instance, self.name)

    def header(self) -> dict[str, Any]:
        return {"name": self.name, "label": self.label}


class Count(Column):
    """Number of members in a relation collection."""

    def render(self, instance: Any) -> int:
        value = read_attribute(instance, self.name)
        return 0 if value is None else len(value)


class Date(Column):
    def __init__(self, name: str, label: str | None = None, format: str = "%Y-%m-%d"):
        super().__init__(name, label)
        self.format = format

    def render(self, instance: Any) -> str | None:
        value = super().render(instance)
        return value.strftime(self.format) if value is not None else None


class Lists(Column):
    """One attribute of every member of a collection, e.g. ``tags.name``."""

    def render(self, instance: Any) -> list[Any]:
        value = super().render(instance)
        if value is None:
            return []
        return value if isinstance(value, list) else [value]


class Custom(Column):
    """Cell computed by a callable of the instance."""

    def __init__(self, name: str, func: Callable[[Any], Any], label: str | None = None):
        super().__init__(name, label)
        self.func = func

    def render(self, instance: Any) -> Any:
        return self.func(instance)
