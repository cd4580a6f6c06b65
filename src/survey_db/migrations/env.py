"""Alembic environment for the survey schema.

Alembic runs synchronously, so migrations connect through the psycopg2
URL from ``survey_db.config`` (install the ``migrations`` extra).  The URL
is read from the environment at run time; the placeholder in
``alembic.ini`` is never used.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from survey_db.config import get_sync_url
from survey_db.models import Base

config = context.config

# ConfigParser treats "%" as interpolation; escape it so URL-encoded
# passwords survive.
config.set_main_option("sqlalchemy.url", get_sync_url().replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    # compare_type: catch column type changes (e.g. String(10) → String(20))
    # in autogenerate, which Alembic skips by default on older releases.
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout (``alembic upgrade head --sql``)."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect to the database and apply pending revisions."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
