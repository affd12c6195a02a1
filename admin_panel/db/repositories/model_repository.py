"""
Model repository - generic admin data access for any registered model.
Challenge: One class serves listing (search, filters, sorting, pagination),
create/update through the form schema, delete and manual reordering.
Design: Scalar relations in `with_` are outer-joined so they can be searched
and sorted on; collections are select-in loaded.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import String, cast, func, inspect as sa_inspect, literal_column, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import RelationshipProperty, aliased, contains_eager, selectinload

from admin_panel.admin.model_item import ModelItem
from admin_panel.cache.redis_client import cache_get, cache_set
from admin_panel.config import get_settings
from admin_panel.core.exceptions import InvalidQueryError, ModelNotFoundError, NotOrderableError
from admin_panel.db import ordering
from admin_panel.db.inspection import (
    coerce_value,
    is_scalar_relation,
    primary_key_name,
    primary_key_value,
    relationship_of,
)
from admin_panel.db.repositories.base_repository import BaseRepository, ModelType
from admin_panel.schemas.table import TableParams

logger = logging.getLogger(__name__)

settings = get_settings()

TWELVE_HOUR_FORMATS = ("%I:%M %p", "%I:%M:%S %p", "%I %p", "%I:%M%p")


@dataclass
class TableData:
    rows: list[Any] = field(default_factory=list)
    total_count: int = 0


def normalize_time(value: Any) -> Any:
    """'2:30 PM' -> '14:30:00'. Anything that is not a 12-hour time passes through."""
    if not isinstance(value, str) or ("AM" not in value and "PM" not in value):
        return value
    for fmt in TWELVE_HOUR_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).strftime("%H:%M:%S")
        except ValueError:
            continue
    return value


def like_pattern(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ModelRepository(BaseRepository[ModelType]):
    """CRUD and listing for the model behind one ModelItem."""

    def __init__(self, model_item: ModelItem, session: AsyncSession, query: Mapping[str, Any] | None = None):
        super().__init__(session, model_item.get_model_class())
        self.model_item = model_item
        self.query = dict(query or {})
        self.instance = self.model()

    # --- lookups -----------------------------------------------------------

    async def find(self, id: Any, *, all_relations: bool = False) -> ModelType:
        """Load by primary key with eager loads. Raises ModelNotFoundError."""
        pk = getattr(self.model, primary_key_name(self.model))
        try:
            key = coerce_value(pk, id)
        except InvalidQueryError:
            raise ModelNotFoundError(self.model, id) from None
        instance = await self.get_by_id(key, self._eager_options(all_relations))
        if instance is None:
            raise ModelNotFoundError(self.model, id)
        return instance

    async def get_instance(self, id: Any = None) -> ModelType:
        """Instance for a form: loaded row, or the fresh unsaved one."""
        if id is not None:
            return await self.find(id)
        return self.instance

    def _eager_options(self, all_relations: bool = False) -> list[Any]:
        if all_relations:
            names = [prop.key for prop in sa_inspect(self.model).relationships]
        else:
            names = dict.fromkeys(self.model_item.get_with() + self.model_item.form_relations())
        return [selectinload(getattr(self.model, name)) for name in names]

    # --- listing -----------------------------------------------------------

    @staticmethod
    def is_relation_supported(prop: RelationshipProperty | None) -> bool:
        """Only scalar relations (many-to-one, one-to-one) can be joined without multiplying rows."""
        return is_scalar_relation(prop)

    def in_with(self, name: str) -> bool:
        """Dotted column name whose relation is eager loaded and joinable."""
        return "." in name and self.model_item.is_joinable(name.split(".", 1)[0])

    def _joined_relations(self) -> dict[str, Any]:
        joined = {}
        for name in self.model_item.get_with():
            prop = relationship_of(self.model, name)
            if self.is_relation_supported(prop):
                joined[name] = aliased(prop.mapper.class_)
        return joined

    def _join(self, stmt, joined: dict[str, Any]):
        for name, target in joined.items():
            stmt = stmt.outerjoin(getattr(self.model, name).of_type(target))
        return stmt

    def _loader_options(self, joined: dict[str, Any]) -> list[Any]:
        options = []
        for name in self.model_item.get_with():
            attribute = getattr(self.model, name)
            if name in joined:
                options.append(contains_eager(attribute.of_type(joined[name])))
            else:
                options.append(selectinload(attribute))
        return options

    def apply_filters(self, stmt) -> tuple[Any, str | None]:
        stmt, subtitles = self.model_item.apply_filters(stmt, self.query)
        return stmt, ", ".join(subtitles) if subtitles else None

    def get_subtitle(self) -> str | None:
        _, subtitle = self.apply_filters(select(self.model))
        return subtitle

    async def table_data(self, params: TableParams | None = None) -> TableData:
        """Rows for the listing plus the filtered total (before search and paging)."""
        joined = self._joined_relations()
        stmt = self._join(select(self.model), joined).options(*self._loader_options(joined))
        stmt, _ = self.apply_filters(stmt.order_by(None))

        count_stmt, _ = self.apply_filters(self._join(select(func.count()).select_from(self.model), joined))
        total_count = (await self.session.execute(count_stmt)).scalar_one()

        if params is not None:
            if params.search:
                stmt = await self._add_search(stmt, joined, like_pattern(params.search))
            if params.limit != -1:
                stmt = stmt.offset(params.offset).limit(params.limit)
            stmt = stmt.order_by(self._order_expression(params.order_by, params.order_dest, joined))
        else:
            stmt = stmt.order_by(self._order_expression(None, "asc", joined))

        result = await self.session.execute(stmt)
        rows = list(result.scalars().all())
        logger.debug("table_data %s: %d rows of %d", self.model_item.alias, len(rows), total_count)
        return TableData(rows=rows, total_count=total_count)

    async def _add_search(self, stmt, joined: dict[str, Any], pattern: str):
        model_table = self.model.__table__
        conditions = []
        for name in await self.get_columns(model_table.name):
            target = model_table.c.get(name)
            if target is None:
                target = self._unmapped_column(model_table, name)
            conditions.append(cast(target, String).ilike(pattern, escape="\\"))

        for display_column in self.model_item.get_columns():
            if not display_column.is_relation_path or not self.model_item.is_searchable(display_column):
                continue
            attribute = display_column.name.split(".", 1)[1]
            target = getattr(joined[display_column.relation], attribute)
            conditions.append(cast(target, String).ilike(pattern, escape="\\"))

        if not conditions:
            return stmt
        return stmt.where(or_(*conditions))

    def _unmapped_column(self, model_table, name: str):
        """Column present in the database but not on the mapper, qualified by the model's own table."""
        preparer = self.session.get_bind().dialect.identifier_preparer
        return literal_column(f"{preparer.format_table(model_table)}.{preparer.quote(name)}")

    def _order_expression(self, order_by: str | None, order_dest: str, joined: dict[str, Any]):
        if order_by is None:
            order_by = ordering.order_field(self.model) or primary_key_name(self.model)
        target = None
        if self.in_with(order_by):
            relation, attribute = order_by.split(".", 1)
            target = getattr(joined[relation], attribute, None)
        elif order_by in sa_inspect(self.model).column_attrs:
            target = getattr(self.model, order_by)
        if target is None:
            raise InvalidQueryError(f"Cannot order {self.model.__name__} by {order_by!r}")
        return target.desc() if order_dest == "desc" else target.asc()

    async def get_columns(self, table_name: str) -> list[str]:
        """Column names of a table from schema introspection, cached for a day."""
        cache_key = settings.column_cache_prefix + table_name
        columns = await cache_get(cache_key)
        if columns:
            return columns
        columns = await self.session.run_sync(
            lambda sync_session: [c["name"] for c in sa_inspect(sync_session.connection()).get_columns(table_name)]
        )
        await cache_set(cache_key, columns, settings.column_cache_ttl_seconds)
        logger.debug("cached %d columns for %s", len(columns), table_name)
        return columns

    # --- writes ------------------------------------------------------------

    async def store(self, data: Mapping[str, Any]) -> ModelType:
        self.instance = self.model()
        await self._save(data, partial=False)
        logger.info("stored %s id=%s", self.model.__name__, primary_key_value(self.instance))
        return self.instance

    async def update(self, id: Any, data: Mapping[str, Any]) -> ModelType:
        self.instance = await self.find(id)
        await self._save(data, partial=True)
        logger.info("updated %s id=%s", self.model.__name__, id)
        return self.instance

    async def _save(self, data: Mapping[str, Any], partial: bool) -> None:
        data = {key: normalize_time(value) for key, value in data.items()}
        cleaned = self.model_item.get_form().validate(data, partial=partial)
        await self._fill(cleaned)

        if sa_inspect(self.instance).transient:
            field_name = ordering.order_field(self.model)
            if field_name is not None and getattr(self.instance, field_name) is None:
                setattr(self.instance, field_name, await ordering.next_order_value(self.session, self.model))
            await self.add(self.instance)
        else:
            await self.session.flush()
        self.instance = await self.find(primary_key_value(self.instance))

    async def _fill(self, data: Mapping[str, Any]) -> None:
        """Assign mapped attributes; relation collections are resolved from primary keys."""
        mapper = sa_inspect(self.model)
        for key, value in data.items():
            prop = mapper.relationships.get(key)
            if prop is not None:
                value = await self._related(prop, value)
            elif key not in mapper.column_attrs:
                continue
            setattr(self.instance, key, value)

    async def _related(self, prop: RelationshipProperty, value: Any) -> Any:
        target = prop.mapper.class_
        pk = getattr(target, primary_key_name(target))
        if not prop.uselist:
            return None if value is None else await self.session.get(target, value)
        ids = list(value or [])
        if not ids:
            return []
        result = await self.session.execute(select(target).where(pk.in_(ids)))
        return list(result.scalars().all())

    async def destroy(self, id: Any) -> None:
        instance = await self.find(id, all_relations=True)
        field_name = ordering.order_field(self.model)
        removed = getattr(instance, field_name) if field_name is not None else None
        await self.delete(instance)
        if removed is not None:
            await ordering.close_gap(self.session, self.model, removed)
        logger.info("destroyed %s id=%s", self.model.__name__, id)

    async def move_up(self, id: Any) -> bool:
        return await self._move(id, -1)

    async def move_down(self, id: Any) -> bool:
        return await self._move(id, 1)

    async def _move(self, id: Any, step: int) -> bool:
        if ordering.order_field(self.model) is None:
            raise NotOrderableError(self.model)
        instance = await self.find(id)
        return await ordering.move(self.session, instance, step)
