"""
Pytest fixtures - test DB, client, fake cache, catalog rows.
Challenge: Isolated tests; no PostgreSQL or Redis needed.
"""

from types import SimpleNamespace
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from admin_panel.admin.bootstrap import register_catalog
from admin_panel.admin.registry import AdminRegistry
from admin_panel.db.base import Base
from admin_panel.db.models import Category, Product, Tag
from admin_panel.db.repositories import model_repository
from admin_panel.db.session import get_db
from admin_panel.main import app

# One in-memory SQLite database per test; StaticPool keeps the single connection alive
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def fake_cache(monkeypatch):
    """In-memory stand-in for the Redis column cache."""
    cache = SimpleNamespace(store={}, ttls={})

    async def cache_get(key):
        return cache.store.get(key)

    async def cache_set(key, value, ttl_seconds=300):
        cache.store[key] = value
        cache.ttls[key] = ttl_seconds
        return True

    monkeypatch.setattr(model_repository, "cache_get", cache_get)
    monkeypatch.setattr(model_repository, "cache_set", cache_set)
    return cache


@pytest.fixture
def registry() -> AdminRegistry:
    return register_catalog(AdminRegistry())


@pytest_asyncio.fixture
async def catalog(session: AsyncSession) -> SimpleNamespace:
    """Two categories, two tags, four products in manual order 0..3."""
    books = Category(name="Books")
    audio = Category(name="Audio")
    new = Tag(name="new")
    sale = Tag(name="sale")
    session.add_all([books, audio, new, sale])
    await session.flush()

    products = [
        Product(title="Python book", price_cents=1999, category=books, tags=[new], sort=0),
        Product(title="Headphones", price_cents=4999, category=audio, tags=[new, sale], sort=1),
        Product(title="Speaker", price_cents=2999, category=audio, tags=[], sort=2, is_active=False),
        Product(title="Jazz vinyl", price_cents=2500, category=None, tags=[], sort=3),
    ]
    session.add_all(products)
    await session.flush()
    # Start every test from a clean identity map, like a fresh request would
    session.expunge_all()
    return SimpleNamespace(
        books_id=books.id,
        audio_id=audio.id,
        new_id=new.id,
        sale_id=sale.id,
        product_ids=[p.id for p in products],
    )
