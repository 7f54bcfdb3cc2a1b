"""
Alembic environment for JobTrack.

The target database comes from DATABASE_URL or JOBTRACK_DATABASE_URL when
either is set, else from sqlalchemy.url in alembic.ini. Batch mode is on so
that ALTERs also work on SQLite.
"""
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

import jobtrack.models  # noqa: F401
import jobtrack.auth.models  # noqa: F401
from jobtrack.database import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

url_from_env = os.getenv("DATABASE_URL") or os.getenv("JOBTRACK_DATABASE_URL")
if url_from_env:
    config.set_main_option("sqlalchemy.url", url_from_env)

target_metadata = Base.metadata
context_options = {"target_metadata": target_metadata, "render_as_batch": True}


def run_offline():
    """Write the migration SQL to stdout instead of executing it."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **context_options,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **context_options)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
