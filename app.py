"""
Flask Application Factory - Main Entry Point

This module implements the application factory for the YARN.com community threads API. It wires
configuration, logging, the database, the request validation pipeline, error handlers and the
blueprints into a single Flask application.

Key Features:
- Environment-specific configuration loading with python-dotenv support
- Flask-SQLAlchemy database initialization and Flask-Migrate schema management
- Threat detection on every request before any view function runs
- Security headers and optional CORS headers on every response
- Consistent JSON error bodies for malformed, oversized, unknown and failing requests

Request Lifecycle:
1. Request id bound to the structured logging context
2. Body parsed, query parameters collapsed, both swept for threats
3. Route-level field validation and sanitization
4. Service layer persistence and marshmallow serialization
5. Security headers, CORS headers and timing header added to the response
"""

import os
import sys
import logging
import time
import traceback
from typing import Any, Dict, Optional

from flask import Flask, g, jsonify, request
from flask.logging import default_handler
from werkzeug.middleware.proxy_fix import ProxyFix

from dotenv import load_dotenv

from config import get_config
from models import db, init_database
from blueprints import BlueprintRegistrationError, register_all_blueprints
from services import init_services
from yarn_core.utils.error_handling import init_error_handlers
from yarn_core.utils.logging import init_logging
from yarn_core.utils.middleware import ThreatDetectionMiddleware
from yarn_core.utils.response import add_cors_headers, add_security_headers

# Configure module-level logging
logger = logging.getLogger(__name__)

WELCOME_MESSAGE = 'Welcome to YARN.com - Community Story Threads API'


class FlaskApplicationError(Exception):
    """Custom exception for Flask application initialization errors."""

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code or 'APPLICATION_ERROR'
        self.details = details or {}
        super().__init__(self.message)


def load_environment_variables() -> bool:
    """
    Load environment variables from ``.env`` files.

    ``.env.<FLASK_ENV>`` takes precedence over ``.env``; variables already
    present in the process environment are never overridden.

    Returns:
        bool: True if at least one file was loaded
    """
    loaded = False
    flask_env = os.environ.get('FLASK_ENV', 'development')
    for env_file in (f'.env.{flask_env}', '.env'):
        if os.path.exists(env_file):
            load_dotenv(env_file, override=False)
            logger.debug(f"Loaded environment variables from {env_file}")
            loaded = True
    return loaded


def configure_logging(app: Flask) -> None:
    """
    Configure standard library logging for the app factory, blueprints and services.

    Structured security logging for the validation pipeline is configured
    separately by ``init_logging``.

    Args:
        app: Flask application instance
    """
    app.logger.removeHandler(default_handler)

    log_level_str = app.config.get('LOG_LEVEL', 'INFO')
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    formatter = logging.Formatter(
        app.config.get('LOG_FORMAT', '%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    app.logger.setLevel(log_level)

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(console_handler)
    root_logger.setLevel(log_level)

    logger.info(f"Logging configured (level: {log_level_str})")


def configure_extensions(app: Flask) -> None:
    """
    Initialize Flask extensions and the request pipeline.

    Raises:
        FlaskApplicationError: If extension initialization fails
    """
    try:
        init_logging(app)
        init_database(app)
        init_services(app)
        ThreatDetectionMiddleware(app)
    except Exception as e:
        logger.error(f"Extension configuration failed: {e}")
        raise FlaskApplicationError(
            f"Failed to configure Flask extensions: {str(e)}",
            error_code="EXTENSION_CONFIG_ERROR",
            details={'error': str(e), 'traceback': traceback.format_exc()}
        )


def configure_request_context(app: Flask) -> None:
    """
    Configure response processing and session cleanup.

    Args:
        app: Flask application instance
    """

    @app.after_request
    def after_request(response):
        """Add timing, security and CORS headers to every response."""
        started = getattr(g, 'request_start_time', None)
        if started is not None:
            request_duration = time.time() - started
            response.headers['X-Response-Time'] = f"{request_duration:.3f}s"
            if request_duration > 1.0:
                logger.warning(
                    f"Slow request: {request.method} {request.path} "
                    f"took {request_duration:.3f}s"
                )

        add_security_headers(response)

        if app.config.get('CORS_ENABLED', False):
            add_cors_headers(
                response,
                origins=app.config.get('CORS_ORIGINS'),
                request_origin=request.headers.get('Origin'),
            )

        return response

    @app.teardown_appcontext
    def cleanup_database_session(error):
        """Clean up database session after request completion."""
        if error is not None:
            db.session.rollback()
        db.session.remove()


def register_root_endpoint(app: Flask) -> None:
    """Register ``GET /`` returning the API welcome message."""

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({'message': WELCOME_MESSAGE})


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Flask application factory.

    Args:
        config_name: Environment configuration name ('development', 'testing',
            'staging', 'production'). If None, determined from FLASK_CONFIG.

    Returns:
        Flask: Fully configured Flask application instance

    Raises:
        FlaskApplicationError: If critical application initialization fails

    Example:
        from app import create_app
        app = create_app('development')
        app.run(debug=True)
    """
    load_environment_variables()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    config_class = get_config(config_name)
    app.config.from_object(config_class)
    config_class.init_app(app)

    configure_logging(app)
    logger.info(f"Flask application created with {config_class.__name__} configuration")

    configure_extensions(app)
    init_error_handlers(app)
    configure_request_context(app)
    register_root_endpoint(app)

    try:
        register_all_blueprints(app)
    except (BlueprintRegistrationError, ImportError) as e:
        logger.error(f"Blueprint registration failed: {e}")
        raise FlaskApplicationError(
            f"Critical blueprint registration failed: {e}",
            error_code="BLUEPRINT_REGISTRATION_FAILED"
        )

    logger.info(
        f"Flask application initialization completed "
        f"(Debug: {app.debug}, Testing: {app.testing})"
    )
    return app


# Development Server Entry Point
if __name__ == '__main__':
    dev_app = create_app()

    with dev_app.app_context():
        db.create_all()

    dev_app.run(
        host=os.environ.get('FLASK_HOST', '0.0.0.0'),
        port=int(os.environ.get('PORT', 5000)),
        debug=dev_app.debug,
        threaded=True
    )
