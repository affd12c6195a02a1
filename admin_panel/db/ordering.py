"""
Manual row ordering for admin listings.
A model opts in by mixing in OrderableMixin (or by declaring __order_field__
next to its own integer column). Order values are kept dense: 0..n-1.
"""

from typing import Any

from sqlalchemy import Integer, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column


class OrderableMixin:
    """Adds the `sort` column used by move up / move down."""

    __order_field__ = "sort"

    sort: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)


def order_field(model: type) -> str | None:
    """Name of the order column, or None when the model is not orderable."""
    return getattr(model, "__order_field__", None)


async def next_order_value(session: AsyncSession, model: type) -> int:
    """Order value for a row appended at the end."""
    column = getattr(model, order_field(model))
    current_max = (await session.execute(select(func.max(column)))).scalar()
    return 0 if current_max is None else current_max + 1


async def move(session: AsyncSession, instance: Any, step: int) -> bool:
    """Swap order values with the nearest neighbour before (step < 0) or after (step > 0).

    Returns False when the instance is already first / last.
    """
    model = type(instance)
    field = order_field(model)
    column = getattr(model, field)
    current = getattr(instance, field)
    stmt = select(model)
    if step < 0:
        stmt = stmt.where(column < current).order_by(column.desc())
    else:
        stmt = stmt.where(column > current).order_by(column.asc())
    neighbour = (await session.execute(stmt.limit(1))).scalar_one_or_none()
    if neighbour is None:
        return False
    setattr(instance, field, getattr(neighbour, field))
    setattr(neighbour, field, current)
    await session.flush()
    return True


async def close_gap(session: AsyncSession, model: type, removed: int) -> None:
    """Shift rows after a deleted one so order values stay dense."""
    field = order_field(model)
    column = getattr(model, field)
    await session.execute(
        update(model)
        .where(column > removed)
        .values({field: column - 1})
        .execution_options(synchronize_session="fetch")
    )
