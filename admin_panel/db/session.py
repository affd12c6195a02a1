"""
Async database session management.
Design: One session per request. Repositories only flush; get_db commits once
the endpoint returns and rolls back if it raised, so a failed store or reorder
leaves no partial writes behind.
"""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from admin_panel.config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool settings for the backend; SQLite's single-file pool takes no size limits."""
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(pool_size=10, max_overflow=20)
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: commit after the endpoint, roll back if it raised."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]
