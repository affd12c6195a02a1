"""
SQLAlchemy declarative base and metadata.
Every model the admin registry exposes derives from Base.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models. Enables Alembic migrations."""

    pass
