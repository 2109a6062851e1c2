"""Alembic environment — async migrations for the local board database.

Design Decisions:
    - The URL comes from opsmap.config.Settings (OPSMAP_DATABASE_URL or .env), so
      migrations and the runtime always agree on the file and the async driver;
      alembic.ini's sqlalchemy.url is only used when Settings has no override
    - render_as_batch: SQLite cannot ALTER most columns in place
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from opsmap.config import Settings
from opsmap.db.base import Base
from opsmap.models.board_snapshot import BoardSnapshotRecord  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
_MIGRATION_OPTIONS = {"target_metadata": target_metadata, "render_as_batch": True}


def _database_url() -> str:
    configured = Settings().database_url
    if configured != Settings.model_fields["database_url"].default:
        return configured
    return config.get_main_option("sqlalchemy.url") or configured


def run_migrations_offline() -> None:
    """Emit SQL without a connection."""
    context.configure(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with(connection: Connection) -> None:
    context.configure(connection=connection, **_MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _database_url()
    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
