from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _products_metadata():
    # Imported lazily: importing app.* resolves Settings (DATABASE_URL / DB_*).
    from app import models  # noqa: F401
    from app.core.db import Base

    return Base.metadata


def _products_database_url() -> str:
    from app.core.config import get_settings

    return get_settings().database_url_resolved


def run_migrations_offline() -> None:
    context.configure(
        url=_products_database_url(),
        target_metadata=_products_metadata(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    # Set here rather than through set_main_option: no ConfigParser "%" interpolation.
    section["sqlalchemy.url"] = _products_database_url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=_products_metadata())

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
