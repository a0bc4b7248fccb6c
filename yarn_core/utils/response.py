"""
Response formatting for rejected requests and security header management.

Every rejection the request pipeline produces is expressed as a
:class:`RejectionResponse` and rendered through :meth:`RejectionResponse.to_response`
so clients always receive the same body shapes:

- threat rejection: ``{"message", "field", "threats"}``
- validation rejection: ``{"message": "Validation failed", "errors": [...]}``
- other failures: ``{"message", "error"}`` or ``{"message", "path"}``

Security headers and the Content-Security-Policy are applied to every
response from :func:`add_security_headers`.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flask import Response, current_app, jsonify

THREAT_MESSAGE = 'Input contains potentially harmful content'
VALIDATION_MESSAGE = 'Validation failed'

# Directive order is preserved in the rendered header
CSP_SETTINGS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('default-src', ("'self'",)),
    ('script-src', ("'self'", "'unsafe-inline'")),
    ('style-src', ("'self'", "'unsafe-inline'")),
    ('img-src', ("'self'", 'data:', 'https:')),
    ('connect-src', ("'self'",)),
    ('font-src', ("'self'",)),
    ('object-src', ("'none'",)),
    ('media-src', ("'self'",)),
    ('frame-src', ("'none'",)),
)


def build_content_security_policy(settings=CSP_SETTINGS) -> str:
    """Render CSP directives as ``directive sources; directive sources``."""
    return '; '.join(f"{directive} {' '.join(sources)}" for directive, sources in settings)


SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Permissions-Policy': 'geolocation=(), microphone=(), camera=()',
    'Content-Security-Policy': build_content_security_policy(),
}

DEFAULT_CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Accept, Origin, X-Request-ID',
    'Access-Control-Max-Age': '86400',
}


@dataclass
class RejectionResponse:
    """
    A client-facing rejection: HTTP status plus JSON body fields.

    ``message`` is always present; ``body`` carries the remaining keys in the
    order they are serialized.
    """

    status: int
    message: str
    body: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = {'message': self.message}
        payload.update(self.body)
        return payload

    def to_response(self) -> Tuple[Response, int]:
        return jsonify(self.to_dict()), self.status


def threat_rejection(field_path: str, threats: Iterable[Any]) -> RejectionResponse:
    """
    Build the 400 response for a threat found by the recursive sweep.

    Args:
        field_path: Dot-joined location of the offending value.
        threats: Threat classes (or their names) detected at that location.
    """
    names = [getattr(threat, 'value', threat) for threat in threats]
    return RejectionResponse(
        status=400,
        message=THREAT_MESSAGE,
        body={'field': field_path, 'threats': names},
    )


def validation_rejection(violations: Iterable[Any]) -> RejectionResponse:
    """Build the 400 response listing every field violation in rule order."""
    return RejectionResponse(
        status=400,
        message=VALIDATION_MESSAGE,
        body={'errors': [violation.to_dict() for violation in violations]},
    )


def error_rejection(status: int, message: str, error: Optional[str] = None) -> RejectionResponse:
    body = {'error': error} if error is not None else {}
    return RejectionResponse(status=status, message=message, body=body)


def service_failure_rejection(message: str, error: Optional[Exception] = None) -> RejectionResponse:
    """500 response for a failed service call; the cause is only exposed in debug mode."""
    detail = str(error) if error is not None and current_app.debug else 'Internal server error'
    return error_rejection(500, message, detail)


def not_found_rejection(path: str) -> RejectionResponse:
    return RejectionResponse(status=404, message='Route not found', body={'path': path})


def add_security_headers(response: Response) -> Response:
    """
    Add security headers to a Flask response.

    Args:
        response: Flask Response object

    Returns:
        Response object with security headers added
    """
    for header, value in SECURITY_HEADERS.items():
        response.headers[header] = value

    if current_app.config.get('SECURE_SSL_REDIRECT', False):
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

    return response


def add_cors_headers(
    response: Response,
    origins: Optional[List[str]] = None,
    request_origin: Optional[str] = None
) -> Response:
    """
    Add CORS headers to a response.

    With no ``origins`` configured any origin is allowed. Otherwise the
    request's ``Origin`` is echoed back only when it is on the list.
    """
    headers = dict(DEFAULT_CORS_HEADERS)
    if origins:
        if request_origin not in origins:
            return response
        headers['Access-Control-Allow-Origin'] = request_origin
        headers['Vary'] = 'Origin'
    for header, value in headers.items():
        response.headers.setdefault(header, value)
    return response
