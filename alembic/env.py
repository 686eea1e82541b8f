"""Alembic environment for the WaterNet schema: URL and metadata come from the application."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from waternet.core.config import get_settings
from waternet.core.logging import configure_logging

# Importing the package registers every table on Base.metadata.
from waternet.models import Base

config = context.config
settings = get_settings()

# alembic.ini may omit logging sections; fall back to the app's own setup.
if config.config_file_name is not None and config.file_config.has_section("loggers"):
    fileConfig(config.config_file_name)
else:
    configure_logging(settings)

target_metadata = Base.metadata


def get_url() -> str:
    """DATABASE_URL from settings, unless overridden with `alembic -x url=...`."""
    return context.get_x_argument(as_dictionary=True).get("url", settings.DATABASE_URL)


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect with a throwaway pool and apply migrations."""
    connectable = create_engine(get_url(), poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
