"""Alembic environment for the matchgate schema.

The database URL comes from, in order: an ``sqlalchemy.url`` already set on
the config (``matchgate-migrate --database-url``), ``ALEMBIC_URL``, then the
application settings.
"""
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from matchgate.core.settings import settings
from matchgate.db.session import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def database_url() -> str:
    return (
        config.get_main_option("sqlalchemy.url")
        or os.getenv("ALEMBIC_URL")
        or settings.effective_database_url
    )


def run_offline() -> None:
    """Emit SQL for the pending revisions without connecting."""
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """Apply the pending revisions over a single connection."""
    engine = create_engine(database_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            # SQLite cannot ALTER most constraints in place.
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
