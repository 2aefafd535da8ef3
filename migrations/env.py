from alembic import context
from sqlalchemy import engine_from_config, pool

from storefront import settings, setup

# Loguru intercepts alembic's stdlib loggers and every model gets registered
setup.run()

from storefront.common.model import BaseModel  # noqa: E402

config = context.config
target_metadata = BaseModel.metadata


class MissingMigrationMessage(Exception): ...


def configure_context(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL to the script output without connecting to the database"""
    configure_context(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    if getattr(config.cmd_opts, 'autogenerate', False) and not config.cmd_opts.message:
        raise MissingMigrationMessage("Missing migration message!\n Add with `alembic revision -m 'some message'`")

    configuration = config.get_section(config.config_ini_section) or {}
    configuration['sqlalchemy.url'] = settings.DATABASE_URL
    connectable = engine_from_config(configuration, prefix='sqlalchemy.', poolclass=pool.NullPool)

    with connectable.connect() as connection:
        # sqlite needs table rebuilds to alter constraints
        configure_context(connection=connection, render_as_batch=connection.dialect.name == 'sqlite')
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
