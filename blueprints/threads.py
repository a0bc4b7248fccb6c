"""
Threads Blueprint - story thread endpoints.

Routes:
- GET  /api/threads        all threads, newest first
- GET  /api/threads/<id>   a single thread
- POST /api/threads        create a thread

Request bodies have already passed the threat sweep by the time a view runs;
field rules are applied per route with ``validate_request``.
"""

import logging

from flask import Blueprint, g, jsonify

from services import NotFoundError, with_service
from yarn_core.utils.error_handling import ResourceNotFoundError
from yarn_core.utils.middleware import validate_request
from yarn_core.utils.response import service_failure_rejection
from yarn_core.utils.validation import ID_PARAMETER_RULES, THREAD_RULES
from .schemas import thread_schema, threads_schema

logger = logging.getLogger(__name__)

threads_bp = Blueprint('threads', __name__)


@threads_bp.route('', methods=['GET'])
@with_service('thread')
def list_threads(thread_service):
    """Return every thread as a JSON array, most recent first."""
    result = thread_service.list_threads()
    if not result.success:
        return service_failure_rejection('Failed to retrieve threads', result.error).to_response()
    return jsonify(threads_schema.dump(result.data))


@threads_bp.route('/<id>', methods=['GET'])
@validate_request(ID_PARAMETER_RULES)
@with_service('thread')
def get_thread(id, thread_service):
    result = thread_service.get_thread(g.validated_data['id'])
    if not result.success:
        if isinstance(result.error, NotFoundError):
            raise ResourceNotFoundError(result.error.message)
        return service_failure_rejection('Failed to retrieve thread', result.error).to_response()
    return jsonify(thread_schema.dump(result.data))


@threads_bp.route('', methods=['POST'])
@validate_request(THREAD_RULES)
@with_service('thread')
def create_thread(thread_service):
    """
    Create a thread from the validated body.

    ``title`` and ``description`` arrive trimmed and sanitized; ``tags``
    arrive lower-cased and default to an empty list.
    """
    result = thread_service.create_thread(g.validated_data)
    if not result.success:
        return service_failure_rejection('Failed to create thread', result.error).to_response()

    return jsonify({
        'message': 'Thread created successfully',
        'thread': thread_schema.dump(result.data),
    }), 201
