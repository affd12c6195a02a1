"""
Listing filters driven by query parameters, e.g. ``/models/products?category_id=3``.
An active filter narrows the statement and contributes a subtitle fragment.
"""

from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import Select

from admin_panel.db.inspection import coerce_value

Scope = Callable[[Select, Any], Select]


class Filter:
    def __init__(
        self,
        name: str,
        alias: str | None = None,
        title: str | Callable[[Any], str] | None = None,
        scope: Scope | None = None,
    ):
        self.name = name
        self.alias = alias or name
        self.title = title
        self.scope = scope

    def value(self, params: Mapping[str, Any]) -> Any:
        value = params.get(self.alias)
        return None if value == "" else value

    def apply(self, model: type, stmt: Select, params: Mapping[str, Any]) -> tuple[Select, str | None]:
        """Narrow stmt when the filter's parameter is present. Returns (stmt, subtitle)."""
        value = self.value(params)
        if value is None:
            return stmt, None
        if self.scope is not None:
            stmt = self.scope(stmt, value)
        else:
            attribute = getattr(model, self.name)
            stmt = stmt.where(attribute == coerce_value(attribute, value))
        return stmt, self.subtitle(value)

    def subtitle(self, value: Any) -> str:
        if callable(self.title):
            return self.title(value)
        if self.title is not None:
            return self.title
        return f"{self.name} = {value}"
