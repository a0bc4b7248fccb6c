"""
Alembic Environment Configuration for Flask-SQLAlchemy Integration

Runs migrations inside a Flask application context so the model metadata registered
on ``models.db`` drives autogeneration.

Key Features:
- Reuses the application of ``flask db`` when present, otherwise builds one
  through the application factory
- Online and offline migration execution modes
- Batch mode on SQLite so ALTER operations work on the development database
"""

import logging
from logging.config import fileConfig

from alembic import context
from flask import current_app, has_app_context

# Alembic Config object for accessing configuration values
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger('alembic.env')


def get_flask_app():
    """
    Return the Flask application that owns the migration run.

    Returns:
        Flask: the current application, or a new one from ``create_app``
    """
    if has_app_context():
        return current_app._get_current_object()

    from app import create_app
    return create_app()


app = get_flask_app()


def get_database_url() -> str:
    return app.config['SQLALCHEMY_DATABASE_URI'].replace('%', '%%')


def get_metadata():
    """Flask-SQLAlchemy metadata containing every model table."""
    from models import db
    metadata = db.metadata
    logger.info(f"Discovered tables in metadata: {sorted(metadata.tables)}")
    return metadata


target_metadata = get_metadata()


def run_migrations_offline() -> None:
    """Emit migration SQL for the configured URL without connecting."""
    url = get_database_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=url.startswith('sqlite'),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against the application's engine."""
    from models import db

    with app.app_context():
        connectable = db.engine
        with connectable.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                render_as_batch=connection.dialect.name == 'sqlite',
            )

            with context.begin_transaction():
                context.run_migrations()

    logger.info("Online migration completed")


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
