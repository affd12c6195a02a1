"""
ModelRepository tests - listing, search, filters, writes and reordering against SQLite.
"""

from datetime import time

import pytest
from sqlalchemy import select, text

from admin_panel.admin import columns
from admin_panel.admin.model_item import ModelItem
from admin_panel.core.exceptions import (
    FormValidationError,
    InvalidQueryError,
    ModelNotFoundError,
    NotOrderableError,
)
from admin_panel.db.models import Product
from admin_panel.db.repositories.model_repository import ModelRepository, like_pattern, normalize_time
from admin_panel.schemas.table import TableParams


def _repo(registry, session, alias="products", query=None) -> ModelRepository:
    return ModelRepository(registry.get(alias), session, query)


def _titles(data) -> list[str]:
    return [row.title for row in data.rows]


async def _sorted_products(session) -> list[tuple[str, int]]:
    result = await session.execute(select(Product.title, Product.sort).order_by(Product.sort))
    return [tuple(row) for row in result.all()]


@pytest.mark.asyncio
async def test_table_data_without_params_returns_everything_in_manual_order(registry, session, catalog):
    data = await _repo(registry, session).table_data()
    assert data.total_count == 4
    assert _titles(data) == ["Python book", "Headphones", "Speaker", "Jazz vinyl"]


@pytest.mark.asyncio
async def test_table_data_eager_loads_relations(registry, session, catalog):
    item = registry.get("products")
    data = await _repo(registry, session).table_data(TableParams(limit=-1))
    rows = {row["title"]: row for row in (item.render_row(r) for r in data.rows)}
    assert rows["Headphones"]["category.name"] == "Audio"
    assert sorted(rows["Headphones"]["tags.name"]) == ["new", "sale"]
    assert rows["Jazz vinyl"]["category.name"] is None
    assert rows["Python book"]["price"] == "19.99"


@pytest.mark.asyncio
async def test_pagination_does_not_change_total_count(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(offset=1, limit=2, order_by="sort"))
    assert data.total_count == 4
    assert _titles(data) == ["Headphones", "Speaker"]


@pytest.mark.asyncio
async def test_limit_minus_one_disables_pagination(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(offset=3, limit=-1))
    assert len(data.rows) == 4


@pytest.mark.asyncio
async def test_search_matches_table_columns_case_insensitively(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(search="HEAD"))
    assert _titles(data) == ["Headphones"]
    assert data.total_count == 4


@pytest.mark.asyncio
async def test_search_matches_joined_relation_columns(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(search="audio", order_by="title"))
    assert _titles(data) == ["Headphones", "Speaker"]


@pytest.mark.asyncio
async def test_search_ignores_collection_relations(registry, session, catalog):
    # "sale" is only a tag name; tags is a collection and cannot be joined
    data = await _repo(registry, session).table_data(TableParams(search="sale"))
    assert data.rows == []


@pytest.mark.asyncio
async def test_search_escapes_like_wildcards(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(search="%"))
    assert data.rows == []
    assert like_pattern("50%_off") == "%50\\%\\_off%"


@pytest.mark.asyncio
async def test_empty_search_adds_no_condition(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(search=""))
    assert len(data.rows) == 4


@pytest.mark.asyncio
async def test_filters_narrow_rows_and_total(registry, session, catalog):
    repo = _repo(registry, session, query={"category": str(catalog.audio_id)})
    data = await repo.table_data(TableParams())
    assert data.total_count == 2
    assert set(_titles(data)) == {"Headphones", "Speaker"}
    assert repo.get_subtitle() == f"Category #{catalog.audio_id}"


@pytest.mark.asyncio
async def test_search_is_anded_with_filters(registry, session, catalog):
    repo = _repo(registry, session, query={"category": str(catalog.books_id)})
    data = await repo.table_data(TableParams(search="audio"))
    assert data.total_count == 1
    assert data.rows == []


@pytest.mark.asyncio
async def test_multiple_filters_join_subtitles(registry, session, catalog):
    repo = _repo(registry, session, query={"category": str(catalog.audio_id), "active": "true"})
    data = await repo.table_data()
    assert _titles(data) == ["Headphones"]
    assert repo.get_subtitle() == f"Category #{catalog.audio_id}, Active only"


@pytest.mark.asyncio
async def test_invalid_filter_value_raises(registry, session, catalog):
    repo = _repo(registry, session, query={"category": "abc"})
    with pytest.raises(InvalidQueryError):
        await repo.table_data()


@pytest.mark.asyncio
async def test_subtitle_is_none_without_filters(registry, session, catalog):
    assert _repo(registry, session).get_subtitle() is None


@pytest.mark.asyncio
async def test_order_by_column_and_direction(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(order_by="price_cents", order_dest="desc"))
    assert _titles(data) == ["Headphones", "Speaker", "Jazz vinyl", "Python book"]


@pytest.mark.asyncio
async def test_order_by_relation_column(registry, session, catalog):
    data = await _repo(registry, session).table_data(TableParams(order_by="category.name", order_dest="desc"))
    assert _titles(data)[0] == "Python book"


@pytest.mark.asyncio
async def test_order_by_unknown_column_raises(registry, session, catalog):
    with pytest.raises(InvalidQueryError):
        await _repo(registry, session).table_data(TableParams(order_by="nope"))


@pytest.mark.asyncio
async def test_only_scalar_relations_in_with_are_joinable(registry, session):
    repo = _repo(registry, session)
    assert repo.in_with("category.name") is True
    assert repo.in_with("tags.name") is False
    assert repo.in_with("title") is False
    assert ModelRepository.is_relation_supported(None) is False


@pytest.mark.asyncio
async def test_column_listing_is_cached_for_a_day(registry, session, catalog, fake_cache):
    repo = _repo(registry, session)
    columns = await repo.get_columns("products")
    assert "title" in columns and "sort" in columns
    assert fake_cache.store["_admin_columns_products"] == columns
    assert fake_cache.ttls["_admin_columns_products"] == 86400


@pytest.mark.asyncio
async def test_search_uses_cached_column_listing(registry, session, catalog, fake_cache):
    fake_cache.store["_admin_columns_products"] = ["description"]
    data = await _repo(registry, session).table_data(TableParams(search="head"))
    assert data.rows == []


@pytest.mark.asyncio
async def test_search_covers_columns_missing_from_the_mapper(registry, session, catalog):
    await session.execute(text("ALTER TABLE products ADD COLUMN legacy_code VARCHAR(20)"))
    await session.execute(text("UPDATE products SET legacy_code = 'ZZ-1' WHERE title = 'Jazz vinyl'"))
    data = await _repo(registry, session).table_data(TableParams(search="zz-1"))
    assert _titles(data) == ["Jazz vinyl"]
    assert data.total_count == 4


@pytest.mark.asyncio
async def test_search_covers_computed_columns_on_joined_relations(session, catalog):
    item = ModelItem(
        Product,
        alias="products_by_category",
        with_=["category"],
        columns=[columns.Custom("category.name", lambda p: p.category.name.upper() if p.category else "")],
    )
    data = await ModelRepository(item, session).table_data(TableParams(search="audio", order_by="title"))
    assert _titles(data) == ["Headphones", "Speaker"]


@pytest.mark.asyncio
async def test_find_and_missing(registry, session, catalog):
    repo = _repo(registry, session)
    product = await repo.find(catalog.product_ids[1])
    assert product.title == "Headphones"
    with pytest.raises(ModelNotFoundError):
        await repo.find(9999)
    with pytest.raises(ModelNotFoundError):
        await repo.find("not-a-number")


@pytest.mark.asyncio
async def test_get_instance_without_id_is_unsaved(registry, session):
    instance = await _repo(registry, session).get_instance()
    assert isinstance(instance, Product)
    assert instance.id is None


@pytest.mark.asyncio
async def test_store_validates_normalizes_and_appends(registry, session, catalog):
    repo = _repo(registry, session)
    product = await repo.store(
        {
            "title": "Turntable",
            "price_cents": "15000",
            "opens_at": "2:30 PM",
            "category_id": catalog.audio_id,
            "tags": [catalog.new_id, catalog.sale_id],
            "unknown_field": "ignored",
        }
    )
    assert product.id is not None
    assert product.opens_at == time(14, 30)
    assert product.price_cents == 15000
    assert product.sort == 4
    assert sorted(t.name for t in product.tags) == ["new", "sale"]
    assert product.category.name == "Audio"


@pytest.mark.asyncio
async def test_store_into_empty_table_starts_order_at_zero(registry, session):
    product = await _repo(registry, session).store({"title": "First"})
    assert product.sort == 0
    assert product.tags == []


@pytest.mark.asyncio
async def test_store_rejects_invalid_data(registry, session, catalog):
    with pytest.raises(FormValidationError) as exc_info:
        await _repo(registry, session).store({"price_cents": 10})
    assert exc_info.value.errors()[0]["loc"] == ("title",)


@pytest.mark.asyncio
async def test_update_is_partial(registry, session, catalog):
    repo = _repo(registry, session)
    product = await repo.update(catalog.product_ids[1], {"price_cents": 100, "tags": []})
    assert product.title == "Headphones"
    assert product.price_cents == 100
    assert product.tags == []


@pytest.mark.asyncio
async def test_update_missing_raises(registry, session, catalog):
    with pytest.raises(ModelNotFoundError):
        await _repo(registry, session).update(9999, {"title": "x"})


@pytest.mark.asyncio
async def test_destroy_keeps_order_dense(registry, session, catalog):
    await _repo(registry, session).destroy(catalog.product_ids[1])
    assert await _sorted_products(session) == [("Python book", 0), ("Speaker", 1), ("Jazz vinyl", 2)]


@pytest.mark.asyncio
async def test_destroy_category_with_products(registry, session, catalog):
    await _repo(registry, session, "categories").destroy(catalog.audio_id)
    data = await _repo(registry, session, "categories").table_data()
    assert [c.name for c in data.rows] == ["Books"]


@pytest.mark.asyncio
async def test_move_down_and_up(registry, session, catalog):
    repo = _repo(registry, session)
    assert await repo.move_down(catalog.product_ids[0]) is True
    assert await _sorted_products(session) == [
        ("Headphones", 0),
        ("Python book", 1),
        ("Speaker", 2),
        ("Jazz vinyl", 3),
    ]
    assert await repo.move_up(catalog.product_ids[0]) is True
    assert (await _sorted_products(session))[0] == ("Python book", 0)


@pytest.mark.asyncio
async def test_move_at_edges_is_noop(registry, session, catalog):
    repo = _repo(registry, session)
    assert await repo.move_up(catalog.product_ids[0]) is False
    assert await repo.move_down(catalog.product_ids[3]) is False


@pytest.mark.asyncio
async def test_move_requires_order_field(registry, session, catalog):
    with pytest.raises(NotOrderableError):
        await _repo(registry, session, "categories").move_up(catalog.books_id)


def test_normalize_time():
    assert normalize_time("2:30 PM") == "14:30:00"
    assert normalize_time("12:05:09 AM") == "00:05:09"
    assert normalize_time("9 AM") == "09:00:00"
    assert normalize_time("AMPLIFIER") == "AMPLIFIER"
    assert normalize_time(42) == 42
