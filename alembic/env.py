"""
Alembic env for the admin catalog schema.
Migrations run through the sync driver of the configured database. SQLite
gets batch mode so ALTER-style operations work there too.

Cached column listings (_admin_columns_<table>) outlive a migration; run
scripts/clear_column_cache.py after one that adds or drops columns.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url
from alembic import context

from admin_panel.config import get_settings
from admin_panel.db.base import Base
from admin_panel.db.models import Category, Product, Tag  # noqa: F401 - register tables on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

database_url = get_settings().sync_database_url
config.set_main_option("sqlalchemy.url", database_url)
render_as_batch = make_url(database_url).get_backend_name() == "sqlite"

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the catalog tables without connecting."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=render_as_batch,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=render_as_batch,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
