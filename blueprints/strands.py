"""
Strands Blueprint - contributions to a thread.

Routes:
- GET  /api/strands/thread/<threadId>   strands of a thread, oldest first
- POST /api/strands                     add a strand to an existing thread
"""

import logging

from flask import Blueprint, g, jsonify

from services import NotFoundError, with_service
from yarn_core.utils.error_handling import ResourceNotFoundError
from yarn_core.utils.middleware import validate_request
from yarn_core.utils.response import service_failure_rejection
from yarn_core.utils.validation import STRAND_RULES, THREAD_REFERENCE_RULES
from .schemas import strand_schema, strands_schema

logger = logging.getLogger(__name__)

strands_bp = Blueprint('strands', __name__)


@strands_bp.route('/thread/<threadId>', methods=['GET'])
@validate_request(THREAD_REFERENCE_RULES)
@with_service('strand')
def list_strands_for_thread(threadId, strand_service):
    result = strand_service.list_for_thread(g.validated_data['threadId'])
    if not result.success:
        return service_failure_rejection('Failed to retrieve strands', result.error).to_response()
    return jsonify(strands_schema.dump(result.data))


@strands_bp.route('', methods=['POST'])
@validate_request(STRAND_RULES)
@with_service('strand')
def create_strand(strand_service):
    """Create a strand; 404 when ``threadId`` names no existing thread."""
    result = strand_service.create_strand(g.validated_data)
    if not result.success:
        if isinstance(result.error, NotFoundError):
            raise ResourceNotFoundError(result.error.message)
        return service_failure_rejection('Failed to create strand', result.error).to_response()

    logger.debug(f"Strand created for thread {result.data.thread_id}")
    return jsonify({
        'message': 'Strand created successfully',
        'strand': strand_schema.dump(result.data),
    }), 201
