"""
Base repository - generic persistence primitives (SOLID: Dependency Inversion).
Challenge: Consistent data access, testability, one place for session handling.
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from admin_panel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses add listing and form handling."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, id: Any, options: Sequence[Any] = ()) -> ModelType | None:
        """Fetch single entity by primary key. Always hits the DB so loader options apply."""
        return await self.session.get(self.model, id, options=list(options), populate_existing=True)

    async def add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()  # Get ID without committing
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Remove entity from DB."""
        await self.session.delete(entity)
        await self.session.flush()
