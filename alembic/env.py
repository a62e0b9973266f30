"""Alembic env for the main database (users, friends).

The session store lives in its own database and creates its table at startup,
so only Base.metadata is migrated here.
"""
from logging.config import fileConfig
import os

from alembic import context

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

from profilehub.db.base import Base  # noqa: E402
from profilehub.db.session import make_engine  # noqa: E402
from profilehub.core.config import get_settings  # noqa: E402

target_metadata = Base.metadata


def get_url() -> str:
    # Priority: ALEMBIC_DATABASE_URL -> -x url=... -> settings (DATABASE_URL or DATA_DIR)
    url = os.getenv("ALEMBIC_DATABASE_URL") or context.get_x_argument(as_dictionary=True).get("url")
    if url:
        return url
    return get_settings().main_database_url


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # same engine setup as the app, so SQLite foreign keys are enforced here too
    engine = make_engine(get_url())
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                # SQLite cannot ALTER constraints in place
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
