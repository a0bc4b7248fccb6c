"""
Error handling for the request pipeline.

This module provides:
- An exception hierarchy for every way the pipeline can reject a request
- Flask error handlers that render those exceptions (and werkzeug HTTP
  errors) as the JSON bodies clients expect
- A last-resort handler so no exception escapes the pipeline uncaught

Integration Points:
- yarn_core.utils.response for body construction
- yarn_core.utils.logging for structured security events
"""

from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, current_app, request
from werkzeug.exceptions import HTTPException

from yarn_core.utils.logging import SecurityEventType, get_logger, log_security_event
from yarn_core.utils.response import (
    RejectionResponse,
    error_rejection,
    not_found_rejection,
    threat_rejection,
    validation_rejection,
)


class BaseApplicationError(Exception):
    """
    Base exception class for all application-specific errors.

    Carries the HTTP status the error maps to and a stable error code for
    logging.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        status_code: int = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format for logging."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'status_code': self.status_code,
            'details': self.details,
        }

    def to_rejection(self) -> RejectionResponse:
        return error_rejection(self.status_code, self.message)


class ThreatDetectedError(BaseApplicationError):
    """Raised when the recursive sweep flags a value in the request."""

    status_code = 400

    def __init__(self, field_path: str, threats: List[str], **kwargs):
        super().__init__(
            f"Threat detected at {field_path}: {', '.join(threats)}",
            error_code='THREAT_DETECTED',
            **kwargs
        )
        self.field_path = field_path
        self.threats = list(threats)

    def to_rejection(self) -> RejectionResponse:
        return threat_rejection(self.field_path, self.threats)


class RequestValidationError(BaseApplicationError):
    """Raised when a rule set reports one or more field violations."""

    status_code = 400

    def __init__(self, violations: List[Any], **kwargs):
        super().__init__(
            f"{len(violations)} field violation(s)",
            error_code='VALIDATION_ERROR',
            **kwargs
        )
        self.violations = list(violations)

    def to_rejection(self) -> RejectionResponse:
        return validation_rejection(self.violations)


class MalformedPayloadError(BaseApplicationError):
    """Raised when the request body cannot be parsed."""

    status_code = 400

    def to_rejection(self) -> RejectionResponse:
        return error_rejection(400, 'Invalid JSON format', 'Malformed request body')


class ScanError(BaseApplicationError):
    """Raised when a value cannot be scanned, e.g. it exceeds the scan limit."""

    status_code = 400

    def to_rejection(self) -> RejectionResponse:
        return error_rejection(400, 'Invalid request', 'Request could not be processed')


class ResourceNotFoundError(BaseApplicationError):
    """Raised when a requested thread or strand does not exist."""

    status_code = 404

    def to_rejection(self) -> RejectionResponse:
        return RejectionResponse(status=404, message=self.message)


class FlaskErrorHandler:
    """
    Flask error handler registration.

    Registers error handlers with the application factory so every
    blueprint produces the same rejection bodies.
    """

    def __init__(self, app: Flask = None):
        self.app = app
        self.logger = get_logger("error_handler")

        if app:
            self.init_app(app)

    def init_app(self, app: Flask):
        """Initialize error handlers with Flask application factory."""
        self.app = app

        self._register_http_error_handlers(app)
        self._register_exception_handlers(app)

        self.logger.debug("Flask error handlers registered")

    def _register_http_error_handlers(self, app: Flask):
        """Register handlers for standard HTTP error codes."""

        @app.errorhandler(400)
        def handle_bad_request(error):
            return error_rejection(400, 'Bad request', error.description).to_response()

        @app.errorhandler(404)
        def handle_not_found(error):
            return not_found_rejection(request.path).to_response()

        @app.errorhandler(405)
        def handle_method_not_allowed(error):
            return error_rejection(405, 'Method not allowed', error.description).to_response()

        @app.errorhandler(413)
        def handle_payload_too_large(error):
            self.logger.warning(
                "Request entity too large",
                content_length=request.content_length,
                limit=current_app.config.get('MAX_CONTENT_LENGTH'),
            )
            return error_rejection(
                413, 'Request entity too large', 'Payload exceeds maximum size limit'
            ).to_response()

        @app.errorhandler(500)
        def handle_internal_server_error(error):
            return self._internal_error_response(error)

    def _register_exception_handlers(self, app: Flask):
        """Register handlers for custom application exceptions."""

        @app.errorhandler(ThreatDetectedError)
        def handle_threat(error: ThreatDetectedError):
            log_security_event(
                SecurityEventType.THREAT_DETECTED,
                "Potential security threat detected",
                field=error.field_path,
                threats=error.threats,
            )
            return error.to_rejection().to_response()

        @app.errorhandler(RequestValidationError)
        def handle_validation_error(error: RequestValidationError):
            self.logger.info(
                "Request validation failed",
                event_type=SecurityEventType.VALIDATION_FAILED.value,
                fields=[violation.field for violation in error.violations],
            )
            return error.to_rejection().to_response()

        @app.errorhandler(ScanError)
        def handle_scan_error(error: ScanError):
            log_security_event(
                SecurityEventType.SCAN_LIMIT_EXCEEDED,
                "Value rejected before scanning",
                **error.details
            )
            return error.to_rejection().to_response()

        @app.errorhandler(MalformedPayloadError)
        def handle_malformed_payload(error: MalformedPayloadError):
            self.logger.info(
                "Malformed request body",
                event_type=SecurityEventType.MALFORMED_PAYLOAD.value,
                reason=error.message,
            )
            return error.to_rejection().to_response()

        @app.errorhandler(BaseApplicationError)
        def handle_application_error(error: BaseApplicationError):
            self.logger.warning("Application error", **error.to_dict())
            return error.to_rejection().to_response()

        @app.errorhandler(Exception)
        def handle_generic_exception(error: Exception):
            if isinstance(error, HTTPException):
                return error
            return self._internal_error_response(error)

    def _internal_error_response(self, error: Exception) -> Tuple[Any, int]:
        """Log an unexpected failure and hide its detail outside debug mode."""
        original = getattr(error, 'original_exception', None) or error
        self.logger.error(
            "Unhandled exception",
            error_type=type(original).__name__,
            exc_info=original,
        )
        _rollback_session()

        detail = str(original) if current_app.debug else 'Something went wrong'
        return error_rejection(500, 'Internal server error', detail).to_response()


def _rollback_session():
    db = current_app.extensions.get('sqlalchemy')
    if db is not None:
        db.session.rollback()


def init_error_handlers(app: Flask) -> FlaskErrorHandler:
    """Register all pipeline error handlers on ``app``."""
    return FlaskErrorHandler(app)
