"""
Alembic environment for the ProMan schema (addresses, residents, expenses).

The database URL comes from the YAML settings named by ``CONFIG`` rather
than alembic.ini, and the driver connect arguments (MySQL SSL flags) are
the ones the application engine uses. SQLite URLs run in batch mode so
ALTER-style operations work there too.
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# Settings are read at import time, so CONFIG must be set first
os.environ.setdefault("CONFIG", "resources/config/local.yaml")

from proman_backend.config import settings  # noqa: E402
from proman_backend.database import (  # noqa: E402
    Base,
    build_engine_options,
    import_models,
)

import_models()

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without connecting."""
    url = settings.database_url
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Apply migrations over a single async connection.

    NullPool keeps the migration run from holding connections afterwards.
    """
    options = build_engine_options(settings.database_url)
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = settings.database_url

    migration_engine = async_engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args=options["connect_args"],
    )

    async with migration_engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await migration_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
