"""
Flask-SQLAlchemy Database Initialization Module

This module provides the shared database instance, model imports and Flask application
integration for the community threads API.

Key Features:
- Flask-SQLAlchemy database instance initialized by the application factory
- Centralized model imports (Thread, Strand) so metadata is complete before
  create_all or migrations run
- Connection health check used by the readiness endpoint
"""

import logging
from typing import Any, Dict

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

# Configure logging for database operations
logger = logging.getLogger(__name__)

# Global SQLAlchemy instance - initialized by Flask application factory
db = SQLAlchemy()

# Alembic migrations through Flask-Migrate (``flask db upgrade``)
migrate = Migrate()


def init_database(app: Flask) -> None:
    """
    Initialize Flask-SQLAlchemy with the application.

    Args:
        app: Flask application instance
    """
    db.init_app(app)
    migrate.init_app(app, db)
    app.logger.info(
        "Database initialized: %s",
        app.config['SQLALCHEMY_DATABASE_URI'].split('@')[-1]
    )


def get_database_health() -> Dict[str, Any]:
    """
    Check that the database answers a trivial query.

    Returns:
        Dict containing ``status`` and, on failure, the error message
    """
    try:
        db.session.execute(text('SELECT 1')).scalar()
        return {'status': 'healthy', 'database_accessible': True}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}")
        db.session.rollback()
        return {'status': 'unhealthy', 'database_accessible': False, 'error': str(e)}


from .base import BaseModel, generate_object_id  # noqa: E402
from .thread import Thread  # noqa: E402
from .strand import Strand  # noqa: E402

__all__ = [
    'db',
    'migrate',
    'init_database',
    'get_database_health',
    'BaseModel',
    'generate_object_id',
    'Thread',
    'Strand',
]
