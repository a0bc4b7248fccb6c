"""
Health Check Blueprint

Liveness and readiness endpoints for load balancers and container orchestration.

Health Check Endpoints:
- /health and /health/liveness: application responsiveness only
- /health/readiness: database connectivity check, 503 when the database is unreachable
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from models import get_database_health

# Configure logging for health check operations
logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


@health_bp.route('', methods=['GET'])
@health_bp.route('/liveness', methods=['GET'])
def liveness_probe():
    """
    Liveness probe: the process is up and serving requests.

    HTTP Status Codes:
        200: Application is responsive
    """
    return jsonify({
        'status': 'healthy',
        'service': 'yarn-community-threads',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'check_type': 'liveness'
    }), 200


@health_bp.route('/readiness', methods=['GET'])
def readiness_probe():
    """
    Readiness probe: the database answers queries.

    HTTP Status Codes:
        200: System is ready to handle traffic
        503: Database unavailable
    """
    started = time.perf_counter()
    db_status = get_database_health()
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    is_ready = db_status['status'] == 'healthy'
    if not is_ready:
        logger.warning(f"Readiness probe failed: {db_status.get('error')}")

    return jsonify({
        'status': 'ready' if is_ready else 'not_ready',
        'checks': {
            'database': {
                'status': db_status['status'],
                'response_time_ms': elapsed_ms,
            }
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'check_type': 'readiness'
    }), 200 if is_ready else 503
