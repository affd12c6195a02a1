"""
ModelItem - admin configuration of one ORM model: what to eager load, which
columns to show, which form to edit it with and which filters apply.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import Select

from admin_panel.admin.columns import Column
from admin_panel.admin.filters import Filter
from admin_panel.admin.form_items import Form, FormItem
from admin_panel.db.inspection import is_scalar_relation, primary_key_value, relationship_of


class ModelItem:
    def __init__(
        self,
        model: type,
        *,
        alias: str | None = None,
        title: str | None = None,
        with_: Iterable[str] = (),
        columns: Iterable[Column] = (),
        form: Form | Iterable[FormItem] | None = None,
        filters: Iterable[Filter] = (),
    ):
        self.model = model
        self.alias = alias or model.__tablename__
        self.title = title or model.__name__
        self.with_ = list(with_)
        self.columns = list(columns)
        self.form = form if isinstance(form, Form) else Form(form or ())
        self.filters = list(filters)
        for name in self.with_:
            if relationship_of(model, name) is None:
                raise ValueError(f"{model.__name__} has no relationship {name!r}")

    def get_model_class(self) -> type:
        return self.model

    def get_with(self) -> list[str]:
        return list(self.with_)

    def get_columns(self) -> list[Column]:
        return list(self.columns)

    def get_form(self) -> Form:
        return self.form

    def is_joinable(self, relation: str | None) -> bool:
        """Relation listed in `with_` that can be outer-joined for search and sort."""
        return relation in self.with_ and is_scalar_relation(relationship_of(self.model, relation))

    def is_searchable(self, column: Column) -> bool:
        """Search covers table columns and mapped columns reached through a joinable relation."""
        if not column.is_relation_path:
            return column.name in self.model.__table__.c
        if not self.is_joinable(column.relation):
            return False
        attribute = column.name.split(".", 1)[1]
        return attribute in relationship_of(self.model, column.relation).mapper.column_attrs

    def form_relations(self) -> list[str]:
        """Form items bound to relationships; they must be loaded before editing."""
        return [item.name for item in self.form if relationship_of(self.model, item.name) is not None]

    def apply_filters(self, stmt: Select, params: Mapping[str, Any]) -> tuple[Select, list[str]]:
        subtitles = []
        for model_filter in self.filters:
            stmt, subtitle = model_filter.apply(self.model, stmt, params)
            if subtitle is not None:
                subtitles.append(subtitle)
        return stmt, subtitles

    def render_row(self, instance: Any) -> dict[str, Any]:
        row = {"id": primary_key_value(instance)}
        for column in self.columns:
            row[column.name] = column.render(instance)
        return row

    def __repr__(self) -> str:
        return f"<ModelItem(alias={self.alias}, model={self.model.__name__})>"
