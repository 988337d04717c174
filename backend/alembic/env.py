"""Alembic migrations for the landlord store, run on a sync driver."""

import logging
from logging.config import fileConfig
from pathlib import Path

# .env must be loaded before app settings are read
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / ".env")

from sqlalchemy import create_engine, pool

from alembic import context

import app.models  # noqa: F401  registers landlords, reviews, votes, contributions
from app.core.config import get_settings
from app.core.database import Base, sync_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

# Autogenerate diffs against the ORM models, including the lower(name) index
target_metadata = Base.metadata


def get_url() -> str:
    url = sync_database_url(get_settings().database_url)
    logger.info(f"[ALEMBIC] Migrating {url.split('://')[0]} store")
    return url


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite cannot ALTER most constraints in place
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a live connection."""
    url = get_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = get_url()
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
