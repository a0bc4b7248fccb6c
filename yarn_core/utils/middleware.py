"""
Request pipeline hooks: threat sweep and rule set validation.

``ThreatDetectionMiddleware`` runs before every view function. It parses the
request body, collapses repeated query parameters and sweeps both for
hostile content. Views then declare their field rules with the
:func:`validate_request` decorator, which only ever sees payloads that
already passed the sweep.
"""

from functools import wraps
from typing import Any, Callable, Optional

from flask import Flask, g, request
from werkzeug.exceptions import BadRequest

from yarn_core.utils.error_handling import MalformedPayloadError, RequestValidationError, ThreatDetectedError
from yarn_core.utils.logging import get_logger, preview
from yarn_core.utils.sweep import collapse_query_params, sweep_request
from yarn_core.utils.threat_scanner import DEFAULT_MAX_SCAN_LENGTH
from yarn_core.utils.validation import RuleSet

logger = get_logger("validation")


def parse_request_body() -> Optional[Any]:
    """
    Parse the current request body as JSON or form data.

    Returns ``None`` for requests without a body.

    Raises:
        MalformedPayloadError: If a JSON body cannot be decoded.
    """
    if request.is_json:
        if not request.get_data(cache=True):
            return None
        try:
            return request.get_json()
        except BadRequest as exc:
            raise MalformedPayloadError(str(exc.description)) from exc
    if request.form:
        return {key: values[-1] for key, values in request.form.lists()}
    return None


class ThreatDetectionMiddleware:
    """
    Flask threat detection middleware.

    Sweeps the body and query string of every request and rejects the
    request at the first value that matches a threat pattern.
    """

    def __init__(self, app: Flask = None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask):
        """Initialize threat detection with Flask app."""
        self.app = app
        app.before_request(self._before_request)

    def _before_request(self):
        g.request_body = parse_request_body()
        g.query_params = collapse_query_params(request.args)

        result = sweep_request(
            g.request_body,
            g.query_params,
            max_length=self.app.config.get('THREAT_SCAN_MAX_LENGTH', DEFAULT_MAX_SCAN_LENGTH),
        )
        if result:
            sections = {'body': g.request_body, 'query': g.query_params}
            logger.warning(
                "Potential security threat detected",
                field=result.path,
                threats=result.report.to_list(),
                value=preview(_lookup(sections[result.section], result.path)),
            )
            raise ThreatDetectedError(result.path, result.report.to_list())
        return None


def _lookup(root: Any, path: str) -> Any:
    """Resolve a dot-joined sweep path inside one request section for logging."""
    node = root
    for key in path.split('.'):
        if isinstance(node, dict) and key in node:
            node = node[key]
        elif isinstance(node, list) and key.isdigit() and int(key) < len(node):
            node = node[int(key)]
        else:
            return None
    return node if isinstance(node, str) else None


def validate_request(rule_set: RuleSet) -> Callable:
    """
    Decorator applying a rule set to the request body and route parameters.

    On success the cleaned values are stored in ``g.validated_data``; on
    failure every violation is raised together as a
    :class:`RequestValidationError`.

    Usage:
        @threads_bp.route('', methods=['POST'])
        @validate_request(THREAD_RULES)
        def create_thread():
            data = g.validated_data
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            if 'request_body' in g:
                body = g.request_body
            else:
                body = parse_request_body()

            result = rule_set.apply(body, request.view_args or {})
            if not result.is_valid:
                raise RequestValidationError(result.violations)

            g.validated_data = result.cleaned_data
            logger.debug(
                "Request validation successful",
                rule_set=rule_set.name,
                validated_fields=list(result.cleaned_data.keys()),
            )
            return func(*args, **kwargs)
        return wrapper
    return decorator
