"""
WSGI Entry Point for Production Deployment

Exposes ``application`` for Gunicorn or any other WSGI server.

Gunicorn Configuration Example:
    gunicorn --bind 0.0.0.0:5000 \
             --workers 4 \
             --graceful-timeout 30 \
             --max-requests 1000 \
             wsgi:application

Environment:
    FLASK_CONFIG   configuration name (default: production)
    DATABASE_URL   database connection string
    SECRET_KEY     required in production
    WSGI_WORKERS   worker count hint for get_optimal_worker_count()
"""

import os
import sys
import logging
import multiprocessing
from typing import Optional

from dotenv import load_dotenv

from app import FlaskApplicationError, create_app

logger = logging.getLogger(__name__)


def get_optimal_worker_count() -> int:
    """
    Recommended Gunicorn worker count: ``(2 x CPU cores) + 1`` capped to 2..32.

    ``WSGI_WORKERS`` overrides the calculation.
    """
    env_worker_count = os.environ.get('WSGI_WORKERS')
    if env_worker_count:
        try:
            return max(2, min(int(env_worker_count), 32))
        except ValueError:
            logger.warning(f"Invalid WSGI_WORKERS value: {env_worker_count}, using calculated value")

    return max(2, min(multiprocessing.cpu_count() * 2 + 1, 32))


def create_wsgi_application(config_name: Optional[str] = None):
    """
    Create the Flask application for WSGI deployment.

    Raises:
        SystemExit: If the application cannot be initialized
    """
    load_dotenv(override=False)
    try:
        app = create_app(config_name or os.environ.get('FLASK_CONFIG', 'production'))
    except (FlaskApplicationError, RuntimeError) as e:
        logger.critical(f"Flask application creation failed: {e}")
        sys.exit(1)

    logger.info(
        f"WSGI application created (PID: {os.getpid()}, "
        f"recommended workers: {get_optimal_worker_count()})"
    )
    return app


application = create_wsgi_application()

__all__ = ['application', 'create_wsgi_application', 'get_optimal_worker_count']
