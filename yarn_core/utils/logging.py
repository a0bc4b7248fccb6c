"""
Structured logging for the request validation pipeline.

Configures structlog with request-scoped context variables so every security
event emitted while a request is being processed carries the same request
identifier. Application-level modules (factory, blueprints, services) keep
using the standard library ``logging`` module; the validation core logs
through the structlog loggers returned by :func:`get_logger`.

Key Features:
- ISO timestamps, log level and merged context variables on every entry
- Console renderer in development, JSON renderer everywhere else
- Per-request ``request_id`` honouring an incoming ``X-Request-ID`` header
- Bounded, escaped previews of untrusted values for log-injection safety
"""

import logging
import time
import uuid
from enum import Enum
from typing import Any, Optional

import structlog
from flask import Flask, g, has_request_context, request

# Longest untrusted value reproduced in a log entry
PREVIEW_LENGTH = 80


class SecurityEventType(Enum):
    """Security event names emitted by the request pipeline."""
    THREAT_DETECTED = "threat_detected"
    VALIDATION_FAILED = "validation_failed"
    SCAN_LIMIT_EXCEEDED = "scan_limit_exceeded"
    MALFORMED_PAYLOAD = "malformed_payload"


def preview(value: Any, limit: int = PREVIEW_LENGTH) -> str:
    """
    Render an untrusted value for logging.

    Control characters are escaped so a crafted value cannot forge extra log
    lines, and the result is truncated to ``limit`` characters.
    """
    text = value if isinstance(value, str) else repr(value)
    text = text.encode('unicode_escape').decode('ascii')
    if len(text) > limit:
        return text[:limit] + '...'
    return text


class StructuredLogger:
    """
    structlog configuration bound to a Flask application.

    Registers request hooks that open and close the per-request logging
    context and mirrors the request identifier into the response headers.
    """

    def __init__(self, app: Optional[Flask] = None):
        self.app = app
        self.logger = structlog.get_logger("yarn")

        if app:
            self.init_app(app)

    def init_app(self, app: Flask):
        """Initialize logging with Flask application factory pattern."""
        self.app = app
        self._configure_structlog(
            level_name=app.config.get('LOG_LEVEL', 'INFO'),
            json_logs=app.config.get('JSON_LOGS', not app.debug),
        )

        app.before_request(self._setup_request_context)
        app.after_request(self._attach_request_id)
        app.teardown_request(self._cleanup_request_context)

        app.extensions['structured_logger'] = self

    def _configure_structlog(self, level_name: str, json_logs: bool):
        """Configure structlog processors and output renderer."""
        shared_processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            self._add_flask_context,
        ]

        if json_logs:
            processors = shared_processors + [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        else:
            processors = shared_processors + [
                structlog.dev.ConsoleRenderer(colors=False)
            ]

        level = getattr(logging, str(level_name).upper(), logging.INFO)
        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(level),
            logger_factory=structlog.WriteLoggerFactory(),
            cache_logger_on_first_use=False,
        )

    def _add_flask_context(self, logger, name, event_dict):
        """Add Flask request context to log entries."""
        if has_request_context():
            event_dict.setdefault('method', request.method)
            event_dict.setdefault('path', request.path)
            event_dict.setdefault('endpoint', request.endpoint)
        return event_dict

    def _setup_request_context(self):
        """Set up logging context for each Flask request."""
        incoming = request.headers.get('X-Request-ID', '')
        g.request_id = incoming if _is_safe_request_id(incoming) else str(uuid.uuid4())
        g.request_start_time = time.time()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=g.request_id,
            remote_addr=request.remote_addr,
        )

    def _attach_request_id(self, response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers['X-Request-ID'] = request_id
        return response

    def _cleanup_request_context(self, exception=None):
        structlog.contextvars.clear_contextvars()


def _is_safe_request_id(value: str) -> bool:
    return 0 < len(value) <= 64 and all(ch.isalnum() or ch in '-_' for ch in value)


def get_logger(name: str = "yarn"):
    """Return a structlog logger for a pipeline component."""
    return structlog.get_logger(name)


def log_security_event(event_type: SecurityEventType, message: str, **kwargs):
    """Emit a warning-level security event through the ``security`` logger."""
    get_logger("security").warning(message, event_type=event_type.value, **kwargs)


def init_logging(app: Flask) -> StructuredLogger:
    """
    Initialize structured logging for Flask application factory pattern.

    Args:
        app: Flask application instance

    Returns:
        StructuredLogger: Configured logger instance
    """
    structured_logger = StructuredLogger(app)
    structured_logger.logger.info(
        "Structured logging initialized",
        log_level=app.config.get('LOG_LEVEL', 'INFO'),
        json_logs=app.config.get('JSON_LOGS', not app.debug),
    )
    return structured_logger
